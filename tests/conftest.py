import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import pytest

from foodcart.configuration.settings import Configuration, LifecycleSettings
from foodcart.database.connection import create_db_engine, init_db
from foodcart.models.cart.cart import Cart
from foodcart.models.cart.cart_line import ProductRef
from foodcart.services.order_history import OrderHistoryService
from foodcart.services.order_lifecycle import OrderLifecycleEngine
from foodcart.services.session_context import SessionContext
from foodcart.storage.history_store import OrderHistoryStore
from foodcart.storage.key_value_store import KeyValueStore


@dataclass
class ManualJob:
    delay: float
    func: Callable[..., Any]
    args: Tuple[Any, ...]
    interval: Optional[float] = None


class ManualScheduler:
    """Records jobs instead of running them; tests fire them explicitly."""

    def __init__(self):
        self.jobs: Dict[str, ManualJob] = {}
        self.running = False
        self._counter = 0

    def start(self):
        self.running = True

    def shutdown(self):
        self.running = False

    def _job_id(self, job_id):
        if job_id is None:
            self._counter += 1
            job_id = f"job-{self._counter}"
        return job_id

    def schedule(self, delay, func, args=(), job_id=None):
        job_id = self._job_id(job_id)
        self.jobs[job_id] = ManualJob(delay, func, tuple(args))
        return job_id

    def every(self, interval, func, args=(), job_id=None):
        job_id = self._job_id(job_id)
        self.jobs[job_id] = ManualJob(interval, func, tuple(args), interval=interval)
        return job_id

    def cancel(self, job_id):
        return self.jobs.pop(job_id, None) is not None

    def cancel_order(self, order_id):
        prefix = f"{order_id}:"
        removed = [job_id for job_id in self.jobs if job_id.startswith(prefix)]
        for job_id in removed:
            del self.jobs[job_id]
        return len(removed)

    def one_shot_jobs(self):
        return {job_id: job for job_id, job in self.jobs.items() if job.interval is None}

    def run_until(self, elapsed):
        """Fire every one-shot job due within ``elapsed`` seconds, earliest first."""
        due = sorted(
            (job for job in self.one_shot_jobs().items() if job[1].delay <= elapsed),
            key=lambda item: item[1].delay,
        )
        for job_id, job in due:
            if self.jobs.pop(job_id, None) is not None:
                job.func(*job.args)

    def run_all(self):
        self.run_until(math.inf)

    def run_in_order(self, *job_ids):
        for job_id in job_ids:
            job = self.jobs.pop(job_id)
            job.func(*job.args)

    def tick(self, job_id):
        job = self.jobs[job_id]
        job.func(*job.args)


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same roll."""

    def __init__(self, roll):
        super().__init__(0)
        self.roll = roll

    def random(self):
        return self.roll


@pytest.fixture
def configuration(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("ENVIRONMENT", "test")
    return Configuration()


@pytest.fixture
def db_engine(configuration):
    engine = create_db_engine(configuration)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def kv_store(db_engine):
    return KeyValueStore(db_engine)


@pytest.fixture
def history_store(kv_store):
    store = OrderHistoryStore(kv_store, "orderHistory")
    store.load()
    return store


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def session_context():
    session = SessionContext()
    session.sign_in("1")
    return session


@pytest.fixture
def history(history_store):
    return OrderHistoryService(history_store)


@pytest.fixture
def settings():
    return LifecycleSettings()


@pytest.fixture
def make_engine(history_store, session_context, manual_scheduler, settings):
    def _make(rng=None, **overrides):
        return OrderLifecycleEngine(
            store=history_store,
            session=session_context,
            scheduler=manual_scheduler,
            settings=overrides.pop("settings", settings),
            rng=rng or random.Random(7),
            **overrides,
        )

    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()


@pytest.fixture
def burger():
    return ProductRef(product_id=1, name="Spicy Mango Burger", unit_price=7.99)


@pytest.fixture
def fries():
    return ProductRef(product_id=2, name="Crispy Lotus Fries", unit_price=4.49)


@pytest.fixture
def cart(burger, fries):
    cart = Cart()
    cart.add(burger)
    cart.add(burger)
    cart.add(fries)
    return cart
