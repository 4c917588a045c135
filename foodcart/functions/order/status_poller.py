import logging
import threading
from typing import Callable, Optional

from foodcart.enums.delivery_status import DELIVERY_PROGRESS
from foodcart.functions.scheduler.scheduler import TransitionScheduler
from foodcart.models.order.order import Order
from foodcart.services.order_history import OrderHistoryService


class OrderStatusPoller:
    """Periodically reads the latest order of one account.

    Polling starts with ``start`` and stops on ``stop`` or as soon as the
    observed order is Delivered or Cancelled.
    """

    def __init__(
        self,
        history: OrderHistoryService,
        scheduler: TransitionScheduler,
        account_id: str,
        interval: float = 2.0,
        on_update: Optional[Callable[[Order], None]] = None,
    ):
        self.history = history
        self.scheduler = scheduler
        self.account_id = account_id
        self.interval = interval
        self.on_update = on_update
        self.latest: Optional[Order] = None
        self._running = False
        self._lock = threading.RLock()

    @property
    def job_id(self) -> str:
        return f"poll:{self.account_id}"

    @property
    def running(self) -> bool:
        return self._running

    @property
    def progress(self) -> int:
        if self.latest is None:
            return 0
        return DELIVERY_PROGRESS[self.latest.delivery_status]

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True

        # First read right away, then on every tick
        if self.poll_once():
            self.scheduler.every(self.interval, self.poll_once, job_id=self.job_id)
            logging.info(f"POLLING >>> Tracking latest order of account {self.account_id} every {self.interval}s")

    def stop(self) -> None:
        with self._lock:
            self._running = False
        self.scheduler.cancel(self.job_id)

    def poll_once(self) -> bool:
        """Fetch the latest order; returns whether polling should go on."""
        latest = self.history.get_latest(self.account_id)
        if latest is None:
            logging.warning(f"POLLING >>> No order history found for account {self.account_id}")
            return self._running

        with self._lock:
            changed = self.latest is None or self.latest != latest
            self.latest = latest

        if changed and self.on_update is not None:
            self.on_update(latest)

        if latest.is_terminal:
            logging.info(f"POLLING >>> Stopping: order {latest.short_id} is {latest.delivery_status.value}")
            self.stop()
            return False

        return self._running
