# orders/views/user_orders.py

"""
BUYER ORDER API (/api/user/orders/)

GET  orders/                 own orders, newest first (?status=...)
POST orders/                 place an order from the cart lines of one store
POST orders/buy-now/         place a single-product order, cart untouched
GET  orders/<id>/            own order detail (pickup code once confirmed)
POST orders/<id>/cancel/     cancel while PENDING and unpaid
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action

from core.responses import EnvelopeMixin, success_response
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    BuyNowInputSerializer,
    CancelOrderInputSerializer,
    CreateOrderInputSerializer,
    OrderSerializer,
)
from orders.services.order_lifecycle import ACTOR_BUYER
from orders.services import order_service
from orders.views.errors import (
    HANDLED_ERRORS,
    domain_error_response,
    not_found,
    parse_id,
)
from permissions.roles import IsUserOrAdmin


class UserOrderViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = OrderSerializer
    permission_classes = [IsUserOrAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        return (
            Order.objects.filter(user=self.request.user)
            .select_related("store")
            .prefetch_related("items", "payments")
            .order_by("-created_at")
        )

    def _reload(self, order: Order) -> dict:
        return OrderSerializer(self.get_queryset().get(id=order.id)).data

    @extend_schema(request=CreateOrderInputSerializer, responses={201: OrderSerializer})
    def create(self, request):
        serializer = CreateOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = order_service.create_order_from_cart(
                user=request.user,
                store_id=data["store_id"],
                pickup_date=data["pickup_date"],
                pickup_time=data["pickup_time"],
                notes=data["notes"],
            )
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(
            data=self._reload(order),
            message="Order placed",
            http_status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=BuyNowInputSerializer, responses={201: OrderSerializer})
    @action(detail=False, methods=["post"], url_path="buy-now")
    def buy_now(self, request):
        serializer = BuyNowInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = order_service.buy_now(
                user=request.user,
                product_id=data["product_id"],
                quantity=data["quantity"],
                store_id=data["store_id"],
                pickup_date=data["pickup_date"],
                pickup_time=data["pickup_time"],
                notes=data["notes"],
            )
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(
            data=self._reload(order),
            message="Order placed",
            http_status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=CancelOrderInputSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        order_id = parse_id(pk)
        if order_id is None:
            return not_found()

        serializer = CancelOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = order_service.cancel_order(
                order_id=order_id,
                actor=ACTOR_BUYER,
                user=request.user,
                reason=serializer.validated_data.get("reason") or "",
            )
        except Order.DoesNotExist:
            return not_found()
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(data=self._reload(order), message="Order cancelled")
