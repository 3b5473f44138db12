# orders/views/admin_orders.py

"""
ADMIN ORDER API (/api/admin/)

GET    stores/<store_id>/orders/   orders of one store (?status=&payment_status=)
GET    orders/                     all orders (?status=&payment_status=&store=&pickup_date=)
GET    orders/<id>/
DELETE orders/<id>/                CANCELLED orders only
PUT    orders/<id>/status/         {status: READY_FOR_COLLECTION | CANCELLED, reason?}
POST   orders/<id>/verify-otp/     {otp} -> COLLECTED
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, generics, mixins, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404

from core.responses import EnvelopeMixin, success_response
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    AdminOrderSerializer,
    UpdateOrderStatusInputSerializer,
    VerifyOTPInputSerializer,
)
from orders.services.order_service import delete_order, update_order_status, verify_pickup_otp
from orders.views.errors import (
    HANDLED_ERRORS,
    domain_error_response,
    not_found,
    parse_id,
)
from permissions.roles import IsAdmin
from store.models import Store


def _admin_orders():
    return (
        Order.objects.select_related("store", "user")
        .prefetch_related("items", "payments")
        .order_by("-created_at")
    )


class AdminOrderViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = AdminOrderSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = OrderFilter
    search_fields = ["order_number", "user__email", "user__full_name"]

    def get_queryset(self):
        return _admin_orders()

    def _reload(self, order: Order) -> dict:
        return AdminOrderSerializer(_admin_orders().get(id=order.id)).data

    def destroy(self, request, pk=None):
        order_id = parse_id(pk)
        if order_id is None:
            return not_found()

        try:
            delete_order(order_id=order_id)
        except Order.DoesNotExist:
            return not_found()
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(data=None, message="Order deleted")

    @extend_schema(request=UpdateOrderStatusInputSerializer, responses={200: AdminOrderSerializer})
    @action(detail=True, methods=["put", "patch"], url_path="status")
    def update_status(self, request, pk=None):
        order_id = parse_id(pk)
        if order_id is None:
            return not_found()

        serializer = UpdateOrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order_status(
                order_id=order_id,
                target_status=serializer.validated_data["status"],
                reason=serializer.validated_data["reason"],
            )
        except Order.DoesNotExist:
            return not_found()
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(
            data=self._reload(order),
            message=f"Order status updated to {order.status}",
        )

    @extend_schema(request=VerifyOTPInputSerializer, responses={200: AdminOrderSerializer})
    @action(detail=True, methods=["post"], url_path="verify-otp")
    def verify_otp(self, request, pk=None):
        order_id = parse_id(pk)
        if order_id is None:
            return not_found()

        serializer = VerifyOTPInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = verify_pickup_otp(order_id=order_id, otp=serializer.validated_data["otp"])
        except Order.DoesNotExist:
            return not_found()
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(data=self._reload(order), message="Order collected")


class AdminStoreOrdersView(EnvelopeMixin, generics.ListAPIView):
    serializer_class = AdminOrderSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        store = get_object_or_404(Store, id=self.kwargs["store_id"])
        return _admin_orders().filter(store=store)
