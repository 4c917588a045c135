from typing import List
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from foodcart.models.cart.cart_line import CartLine


class CartItemCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: int
    name: str
    unit_price: float = Field(ge=0)


class CartItemUpdate(BaseModel):
    # Zero or less removes the line
    quantity: int


class CartRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    lines: List[CartLine] = []
    total: float
    total_items: int
