# orders/views/payments.py

"""
PAYMENT RECEIPT API

Buyer (/api/user/payments/):
- GET  payments/                   own receipts, newest first
- GET  payments/<id>/
- POST payments/submit-receipt/    multipart {order_id, receipt_image, amount?, payment_method?, notes?}
- GET  payments/order/<order_id>/  latest receipt for one of own orders

Admin (/api/admin/payments/):
- GET  payments/                   ?status=PENDING for the review queue
- GET  payments/<id>/
- PUT  payments/<id>/verify/       {status: VERIFIED | REJECTED, verification_notes}
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from core.responses import EnvelopeMixin, success_response
from orders.filters import PaymentFilter
from orders.models import Order, Payment
from orders.serializers import (
    PaymentSerializer,
    ReviewPaymentInputSerializer,
    SubmitReceiptInputSerializer,
)
from orders.services import payment_service
from orders.views.errors import (
    HANDLED_ERRORS,
    domain_error_response,
    not_found,
    parse_id,
)
from permissions.roles import IsAdmin, IsUserOrAdmin


def _payments():
    return Payment.objects.select_related("order", "user").order_by("-submitted_at")


class UserPaymentViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = PaymentSerializer
    permission_classes = [IsUserOrAdmin]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PaymentFilter

    def get_queryset(self):
        return _payments().filter(user=self.request.user)

    @extend_schema(request=SubmitReceiptInputSerializer, responses={201: PaymentSerializer})
    @action(detail=False, methods=["post"], url_path="submit-receipt")
    def submit_receipt(self, request):
        serializer = SubmitReceiptInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = payment_service.submit_receipt(
                user=request.user,
                order_id=data["order_id"],
                receipt_image=data["receipt_image"],
                amount=data.get("amount"),
                payment_method=data["payment_method"],
                notes=data["notes"],
            )
        except Order.DoesNotExist:
            return not_found()
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        return success_response(
            data=PaymentSerializer(payment).data,
            message="Receipt submitted; awaiting verification",
            http_status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: PaymentSerializer})
    @action(detail=False, methods=["get"], url_path=r"order/(?P<order_id>[^/.]+)")
    def for_order(self, request, order_id=None):
        order_id = parse_id(order_id)
        order = (
            Order.objects.filter(id=order_id, user=request.user).first()
            if order_id is not None
            else None
        )
        if order is None:
            return not_found()

        payment = payment_service.latest_payment_for_order(order)
        if payment is None:
            return not_found("No payment submitted for this order")
        return success_response(data=PaymentSerializer(payment).data)


class AdminPaymentViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = PaymentSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PaymentFilter

    def get_queryset(self):
        return _payments()

    @extend_schema(request=ReviewPaymentInputSerializer, responses={200: PaymentSerializer})
    @action(detail=True, methods=["put", "post"])
    def verify(self, request, pk=None):
        payment_id = parse_id(pk)
        if payment_id is None:
            return not_found("Payment not found")

        serializer = ReviewPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = payment_service.review_payment(
                payment_id=payment_id,
                reviewer=request.user,
                decision=serializer.validated_data["status"],
                verification_notes=serializer.validated_data["verification_notes"],
            )
        except Payment.DoesNotExist:
            return not_found("Payment not found")
        except Order.DoesNotExist:
            return not_found()
        except HANDLED_ERRORS as exc:
            return domain_error_response(exc)

        message = (
            "Payment verified; order confirmed"
            if payment.status == Payment.STATUS_VERIFIED
            else "Payment rejected"
        )
        return success_response(data=PaymentSerializer(payment).data, message=message)
