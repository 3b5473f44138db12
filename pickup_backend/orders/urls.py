# orders/urls.py

"""
ORDERS + PAYMENTS URLS

- public_urlpatterns -> /api/user/   (orders, payments)
- admin_urlpatterns  -> /api/admin/  (orders, store orders, payments)
"""

from django.urls import path
from rest_framework.routers import SimpleRouter

from orders.views import (
    AdminOrderViewSet,
    AdminPaymentViewSet,
    AdminStoreOrdersView,
    UserOrderViewSet,
    UserPaymentViewSet,
)

public_router = SimpleRouter()
public_router.register(r"orders", UserOrderViewSet, basename="user-orders")
public_router.register(r"payments", UserPaymentViewSet, basename="user-payments")

admin_router = SimpleRouter()
admin_router.register(r"orders", AdminOrderViewSet, basename="admin-orders")
admin_router.register(r"payments", AdminPaymentViewSet, basename="admin-payments")

public_urlpatterns = public_router.urls

admin_urlpatterns = [
    path(
        "stores/<uuid:store_id>/orders/",
        AdminStoreOrdersView.as_view(),
        name="admin-store-orders",
    ),
] + admin_router.urls
