from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from foodcart.enums.delivery_status import DeliveryStatus
from foodcart.models.order.order import Order


class OrderCreate(BaseModel):
    notes: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: DeliveryStatus


class OrderTracking(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order: Optional[Order] = None
    progress: int = 0
    polling: bool = False
