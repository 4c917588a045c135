import logging
from fastapi import APIRouter, Depends

from foodcart.models.cart.cart import Cart
from foodcart.models.cart.cart_line import ProductRef
from foodcart.routes.dependencies import get_cart
from foodcart.schemas.cart import CartItemCreate, CartItemUpdate, CartRead


def cart_read(cart: Cart) -> CartRead:
    return CartRead(lines=cart.lines, total=cart.total, total_items=cart.total_items)


class CartRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.add_api_route("/cart/", self.read_cart, methods=["GET"], response_model=CartRead)
        self.add_api_route("/cart/items/", self.add_item, methods=["POST"], response_model=CartRead)
        self.add_api_route("/cart/items/{product_id}", self.update_item, methods=["PATCH"], response_model=CartRead)
        self.add_api_route("/cart/items/{product_id}", self.remove_item, methods=["DELETE"], response_model=CartRead)
        self.add_api_route("/cart/items/", self.cancel_cart, methods=["DELETE"], response_model=dict)

    def read_cart(self, cart: Cart = Depends(get_cart)):
        return cart_read(cart)

    def add_item(self, item_data: CartItemCreate, cart: Cart = Depends(get_cart)):
        line = cart.add(ProductRef(**item_data.model_dump()))
        logging.info(f"CART >>> Added {line.name} (qty {line.quantity})")
        return cart_read(cart)

    def update_item(self, product_id: int, update_data: CartItemUpdate, cart: Cart = Depends(get_cart)):
        cart.set_quantity(product_id, update_data.quantity)
        return cart_read(cart)

    def remove_item(self, product_id: int, cart: Cart = Depends(get_cart)):
        line = cart.get(product_id)
        cart.remove(product_id)
        if line:
            logging.info(f"CART >>> Removed {line.name}")
        return cart_read(cart)

    def cancel_cart(self, cart: Cart = Depends(get_cart)):
        cart.clear()
        logging.info("CART >>> Cart cancelled")
        return {"message": "Cart cleared"}
