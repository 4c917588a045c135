import logging
import threading
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from foodcart.models.cart.cart_line import CartLine, ProductRef


class Cart:
    """In-memory shopping cart, one line per product.

    Lines are immutable; every mutation swaps in a new ``CartLine`` so a
    snapshot taken at submission time never changes afterwards.
    """

    def __init__(self) -> None:
        self._lines: Dict[int, CartLine] = OrderedDict()
        self._lock = threading.RLock()

    @property
    def lines(self) -> List[CartLine]:
        with self._lock:
            return list(self._lines.values())

    @property
    def total(self) -> float:
        with self._lock:
            return sum(line.subtotal for line in self._lines.values())

    @property
    def total_items(self) -> int:
        with self._lock:
            return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        with self._lock:
            return not self._lines

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)

    def get(self, product_id: int) -> Optional[CartLine]:
        with self._lock:
            return self._lines.get(product_id)

    def add(self, item: ProductRef) -> CartLine:
        with self._lock:
            existing = self._lines.get(item.product_id)
            if existing:
                line = existing.model_copy(update={"quantity": existing.quantity + 1})
            else:
                line = CartLine(
                    product_id=item.product_id,
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=1,
                )
            self._lines[item.product_id] = line

        logging.debug(f"CART >>> {line.name} x {line.quantity} (total {self.total:.2f})")
        return line

    def remove(self, product_id: int) -> None:
        with self._lock:
            self._lines.pop(product_id, None)

    def set_quantity(self, product_id: int, quantity: int) -> Optional[CartLine]:
        # Zero or negative quantities drop the line
        if quantity <= 0:
            self.remove(product_id)
            return None

        with self._lock:
            existing = self._lines.get(product_id)
            if not existing:
                return None
            line = existing.model_copy(update={"quantity": quantity})
            self._lines[product_id] = line
            return line

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def snapshot(self) -> Tuple[Tuple[CartLine, ...], float]:
        """Return the current lines and their total, taken atomically."""
        with self._lock:
            lines = tuple(self._lines.values())
            return lines, sum(line.subtotal for line in lines)
