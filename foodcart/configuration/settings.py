import logging
import os
from dataclasses import dataclass
from dotenv import load_dotenv

from foodcart.exceptions.foodcart_error import ConfigurationError

# Logging setup
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# Load environment variables
load_dotenv(dotenv_path=".env", encoding="utf-8")

# Silence SQLAlchemy and APScheduler logs
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("apscheduler").setLevel(logging.WARNING)


@dataclass(frozen=True)
class LifecycleSettings:
    """Timing and outcome distribution of the simulated delivery pipeline.

    Delays are in seconds. The three probabilities describe the final outcome
    drawn once per order and must add up to 1.
    """

    short_delay: float = 3.0
    medium_delay: float = 6.0
    cancel_delay: float = 4.0
    deliver_delay: float = 9.0
    cancel_probability: float = 0.2
    stall_probability: float = 0.3
    deliver_probability: float = 0.5

    def __post_init__(self):
        delays = {
            "short_delay": self.short_delay,
            "medium_delay": self.medium_delay,
            "cancel_delay": self.cancel_delay,
            "deliver_delay": self.deliver_delay,
        }
        for name, value in delays.items():
            if value < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {value}")

        if self.medium_delay <= self.short_delay:
            raise ConfigurationError(
                f"medium_delay ({self.medium_delay}) must be longer than short_delay ({self.short_delay})"
            )

        probabilities = (self.cancel_probability, self.stall_probability, self.deliver_probability)
        if any(p < 0 or p > 1 for p in probabilities):
            raise ConfigurationError(f"Outcome probabilities must be between 0 and 1, got {probabilities}")
        if abs(sum(probabilities) - 1.0) > 1e-9:
            raise ConfigurationError(f"Outcome probabilities must sum to 1, got {sum(probabilities)}")


class Configuration:
    def __init__(self):

        # Environment
        self.environment = os.getenv("ENVIRONMENT", "development").lower()

        # Database backing the key-value storage
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./foodcart.db")
        self.history_storage_key = os.getenv("HISTORY_STORAGE_KEY", "orderHistory")

        # Scheduler
        self.scheduler_timezone = os.getenv("SCHEDULER_TIMEZONE", "UTC")
        self.poll_interval_seconds = _float_env("ORDER_POLL_INTERVAL_SECONDS", 2)
        if self.poll_interval_seconds <= 0:
            raise ConfigurationError("ORDER_POLL_INTERVAL_SECONDS must be positive")

        # Delivery simulation
        self.lifecycle = LifecycleSettings(
            short_delay=_float_env("ORDER_SHORT_DELAY_SECONDS", 3),
            medium_delay=_float_env("ORDER_MEDIUM_DELAY_SECONDS", 6),
            cancel_delay=_float_env("ORDER_CANCEL_DELAY_SECONDS", 4),
            deliver_delay=_float_env("ORDER_DELIVER_DELAY_SECONDS", 9),
            cancel_probability=_float_env("ORDER_CANCEL_PROBABILITY", 0.2),
            stall_probability=_float_env("ORDER_STALL_PROBABILITY", 0.3),
            deliver_probability=_float_env("ORDER_DELIVER_PROBABILITY", 0.5),
        )

    def connect_to_database(self):
        logging.info(f"DATABASE >>> Storage selected -> {self.database_url}")
        return self.database_url


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return float(default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
