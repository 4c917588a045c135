from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProductRef(BaseModel):
    """A menu product as handed to the cart by the view layer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: int
    name: str
    unit_price: float = Field(ge=0)


class CartLine(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: int
    name: str
    unit_price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity
