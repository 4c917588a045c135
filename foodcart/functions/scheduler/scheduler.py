# foodcart/functions/scheduler/scheduler.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Sequence

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler


class TransitionScheduler:
    """Delayed and recurring jobs on top of a BackgroundScheduler.

    Job ids of order transitions are prefixed with the order id, which lets
    ``cancel_order`` drop everything still pending for one order.
    """

    def __init__(self, timezone_name: str = "UTC", scheduler: Optional[BackgroundScheduler] = None):
        self.scheduler = scheduler or BackgroundScheduler(timezone=timezone_name)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logging.info("SCHEDULER >>> Started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logging.info("SCHEDULER >>> Stopped")

    def schedule(self, delay: float, func: Callable[..., Any], args: Sequence[Any] = (), job_id: Optional[str] = None) -> str:
        run_date = datetime.now(timezone.utc) + timedelta(seconds=delay)
        job = self.scheduler.add_job(
            func,
            "date",
            run_date=run_date,
            args=list(args),
            id=job_id,
            replace_existing=True,
            misfire_grace_time=None,
        )
        logging.debug(f"SCHEDULER >>> Job {job.id} scheduled in {delay}s")
        return job.id

    def every(self, interval: float, func: Callable[..., Any], args: Sequence[Any] = (), job_id: Optional[str] = None) -> str:
        job = self.scheduler.add_job(
            func,
            "interval",
            seconds=interval,
            args=list(args),
            id=job_id,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        logging.debug(f"SCHEDULER >>> Job {job.id} runs every {interval}s")
        return job.id

    def cancel(self, job_id: str) -> bool:
        try:
            self.scheduler.remove_job(job_id)
            return True
        except JobLookupError:
            return False

    def cancel_order(self, order_id: str) -> int:
        prefix = f"{order_id}:"
        removed = 0
        for job in self.scheduler.get_jobs():
            if job.id.startswith(prefix) and self.cancel(job.id):
                removed += 1
        if removed:
            logging.info(f"SCHEDULER >>> Dropped {removed} pending jobs of order {order_id[:8]}")
        return removed
