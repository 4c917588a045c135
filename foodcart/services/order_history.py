from typing import List, Optional

from foodcart.models.order.order import Order
from foodcart.storage.history_store import OrderHistoryStore


class OrderHistoryService:
    """Read-only views over the stored order history."""

    def __init__(self, store: OrderHistoryStore):
        self.store = store

    def get_history(self, account_id: Optional[str]) -> List[Order]:
        if account_id is None:
            return []
        return self.store.orders_for(account_id)

    def get_latest(self, account_id: Optional[str]) -> Optional[Order]:
        history = self.get_history(account_id)
        return history[-1] if history else None

    def get_order(self, account_id: Optional[str], order_id: str) -> Optional[Order]:
        if account_id is None:
            return None
        return self.store.find(account_id, order_id)
