# foodcart/models/__init__.py

from .cart.cart_line import CartLine, ProductRef
from .cart.cart import Cart
from .order.delivery_partner import DeliveryPartner
from .order.order import Order
from .storage.storage_entry import StorageEntry
