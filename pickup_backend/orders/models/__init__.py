from .order import Order
from .order_item import OrderItem
from .payment import Payment

__all__ = ["Order", "OrderItem", "Payment"]
