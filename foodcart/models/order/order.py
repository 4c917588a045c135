from datetime import datetime, timezone
from typing import Tuple
import uuid
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from foodcart.enums.delivery_status import DeliveryStatus
from foodcart.models.cart.cart_line import CartLine
from foodcart.models.order.delivery_partner import DeliveryPartner

ORDER_SHORT_ID_LENGTH = 8

def generate_order_id() -> str:
    return str(uuid.uuid4())

class Order(BaseModel):
    """A submitted order.

    Orders are frozen: a status change produces a new instance through
    ``with_status`` and every other field is carried over untouched.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    order_id: str = Field(default_factory=generate_order_id, min_length=1)
    line_items: Tuple[CartLine, ...]
    total: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    notes: str = ""
    delivery_status: DeliveryStatus = DeliveryStatus.PENDING
    delivery_partner: DeliveryPartner = Field(default_factory=DeliveryPartner.not_assigned)

    @property
    def short_id(self) -> str:
        return self.order_id[:ORDER_SHORT_ID_LENGTH]

    @property
    def is_terminal(self) -> bool:
        return self.delivery_status.is_terminal

    def with_status(self, status: DeliveryStatus) -> "Order":
        return self.model_copy(update={"delivery_status": status})
