from .admin_orders import AdminOrderViewSet, AdminStoreOrdersView
from .payments import AdminPaymentViewSet, UserPaymentViewSet
from .user_orders import UserOrderViewSet

__all__ = [
    "AdminOrderViewSet",
    "AdminStoreOrdersView",
    "AdminPaymentViewSet",
    "UserPaymentViewSet",
    "UserOrderViewSet",
]
