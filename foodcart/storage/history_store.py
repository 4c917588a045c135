import json
import logging
import threading
from typing import Dict, List, Optional
from pydantic import TypeAdapter, ValidationError

from foodcart.enums.delivery_status import DeliveryStatus
from foodcart.models.order.order import Order
from foodcart.exceptions.foodcart_error import StorageError
from foodcart.storage.key_value_store import KeyValueStore
from foodcart.storage.migrations import migrate_order_record

OrderHistory = Dict[str, List[Order]]

HISTORY_ADAPTER = TypeAdapter(OrderHistory)


def serialize_history(history: OrderHistory) -> str:
    return HISTORY_ADAPTER.dump_json(history, by_alias=True).decode("utf-8")


def deserialize_history(raw: Optional[str]) -> OrderHistory:
    """Parse the stored blob, upgrading old records on the way.

    Anything that cannot be parsed is discarded and an empty history is
    returned instead.
    """
    if not raw:
        return {}

    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise TypeError(f"Order history must be an object, got {type(data).__name__}")

        migrated = {}
        for account_id, records in data.items():
            if not isinstance(records, list):
                raise TypeError(f"Orders of account {account_id} must be a list")
            migrated[str(account_id)] = [migrate_order_record(record) for record in records]

        return HISTORY_ADAPTER.validate_python(migrated)
    except (ValueError, TypeError, RecursionError, ValidationError) as e:
        logging.warning(f"STORAGE >>> Discarding malformed order history -> {e}")
        return {}


class OrderHistoryStore:
    """Order history partitioned by account, persisted as one blob.

    Every mutation writes the whole new mapping first and only replaces the
    in-memory copy once the write went through. All access goes through a
    single lock since scheduled transitions run on worker threads.
    """

    def __init__(self, kv_store: KeyValueStore, storage_key: str = "orderHistory"):
        self.kv_store = kv_store
        self.storage_key = storage_key
        self._history: OrderHistory = {}
        self._loaded = False
        self._lock = threading.RLock()

    def load(self) -> OrderHistory:
        with self._lock:
            if not self._read():
                return {}

            # Makes migrated defaults durable right away
            try:
                self.save()
            except StorageError:
                logging.warning("STORAGE >>> Migrated order history kept in memory only until the next save")

            total = sum(len(orders) for orders in self._history.values())
            logging.info(f"STORAGE >>> Loaded {total} orders for {len(self._history)} accounts")
            return self.snapshot()

    def _read(self) -> bool:
        try:
            raw = self.kv_store.get(self.storage_key)
        except StorageError:
            # Stored data is left untouched, nothing is written until a read succeeds
            logging.error("STORAGE >>> Order history unavailable, starting empty")
            self._history = {}
            self._loaded = False
            return False

        self._history = deserialize_history(raw)
        self._loaded = True
        return True

    def _ensure_loaded(self) -> bool:
        return self._loaded or self._read()

    def _commit(self, history: OrderHistory) -> bool:
        try:
            self.kv_store.set(self.storage_key, serialize_history(history))
        except StorageError:
            logging.error("STORAGE >>> Order history not saved, change discarded")
            return False
        self._history = history
        return True

    def save(self) -> None:
        with self._lock:
            self.kv_store.set(self.storage_key, serialize_history(self._history))

    def snapshot(self) -> OrderHistory:
        with self._lock:
            return {account_id: list(orders) for account_id, orders in self._history.items()}

    def orders_for(self, account_id: str) -> List[Order]:
        with self._lock:
            return list(self._history.get(account_id, []))

    def find(self, account_id: str, order_id: str) -> Optional[Order]:
        with self._lock:
            for order in self._history.get(account_id, []):
                if order.order_id == order_id:
                    return order
            return None

    def append(self, account_id: str, order: Order) -> Optional[Order]:
        with self._lock:
            if not self._ensure_loaded():
                return None

            history = self.snapshot()
            history.setdefault(account_id, []).append(order)
            if not self._commit(history):
                return None

        logging.info(f"STORAGE >>> Order {order.short_id} saved for account {account_id}")
        return order

    def update_status(self, account_id: str, order_id: str, status: DeliveryStatus) -> Optional[Order]:
        """Rewrite the status of one order in place.

        Returns the updated order, or None when the order does not exist in
        the account's partition, has already reached a terminal status, or
        the change could not be saved.
        """
        with self._lock:
            if not self._ensure_loaded():
                return None

            history = self.snapshot()
            orders = history.get(account_id, [])
            for index, order in enumerate(orders):
                if order.order_id != order_id:
                    continue

                if order.is_terminal:
                    logging.info(
                        f"STORAGE >>> Order {order.short_id} is already {order.delivery_status.value}, "
                        f"ignoring {status.value}"
                    )
                    return None

                if order.delivery_status == status:
                    return order

                updated = order.with_status(status)
                orders[index] = updated
                if not self._commit(history):
                    return None
                return updated

        logging.info(f"STORAGE >>> Order {order_id} not found for account {account_id}")
        return None
