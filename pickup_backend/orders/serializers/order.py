# orders/serializers/order.py

"""
ORDER SERIALIZERS

Read shapes:
- OrderSerializer       : buyer view; includes the pickup code once issued
- AdminOrderSerializer  : admin view; includes the buyer, never the code

Both expose `available_actions`, the controls a client should render for
the order given the viewer's role.
"""

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from orders.models import Order, OrderItem, Payment
from orders.services.order_lifecycle import ACTOR_ADMIN, ACTOR_BUYER, available_actions
from store.serializers import StoreSummarySerializer
from users.serializers import UserSummarySerializer

OTP_VISIBLE_STATUSES = {Order.STATUS_CONFIRMED, Order.STATUS_READY_FOR_COLLECTION}


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["id", "product", "product_name", "quantity", "unit_price", "subtotal"]
        read_only_fields = fields


class _LatestPaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "status", "amount", "verification_notes", "submitted_at", "verified_at"]
        read_only_fields = fields


class _BaseOrderSerializer(serializers.ModelSerializer):
    store_detail = StoreSummarySerializer(source="store", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    latest_payment = serializers.SerializerMethodField()
    available_actions = serializers.SerializerMethodField()

    actor = None

    order_fields = [
        "id",
        "order_number",
        "store",
        "store_detail",
        "items",
        "total_amount",
        "pickup_date",
        "pickup_time",
        "notes",
        "status",
        "payment_status",
        "cancel_reason",
        "latest_payment",
        "available_actions",
        "created_at",
        "updated_at",
        "confirmed_at",
        "ready_at",
        "collected_at",
        "cancelled_at",
    ]

    def _payments(self, obj):
        # Uses prefetched payments when the view provided them.
        return sorted(obj.payments.all(), key=lambda p: p.submitted_at, reverse=True)

    def get_latest_payment(self, obj) -> dict | None:
        payments = self._payments(obj)
        return _LatestPaymentSerializer(payments[0]).data if payments else None

    def get_available_actions(self, obj) -> list[str]:
        has_pending = any(p.status == Payment.STATUS_PENDING for p in self._payments(obj))
        return available_actions(obj, self.actor, has_pending_payment=has_pending)


class OrderSerializer(_BaseOrderSerializer):
    otp = serializers.SerializerMethodField()

    actor = ACTOR_BUYER

    class Meta:
        model = Order
        fields = _BaseOrderSerializer.order_fields + ["otp"]
        read_only_fields = fields

    def get_otp(self, obj) -> str | None:
        if obj.status in OTP_VISIBLE_STATUSES and obj.otp:
            return obj.otp
        return None


class AdminOrderSerializer(_BaseOrderSerializer):
    user_detail = UserSummarySerializer(source="user", read_only=True)

    actor = ACTOR_ADMIN

    class Meta:
        model = Order
        fields = _BaseOrderSerializer.order_fields + ["user", "user_detail"]
        read_only_fields = fields


# =====================================================
# INPUT SERIALIZERS
# =====================================================

class _PickupInputSerializer(serializers.Serializer):
    store_id = serializers.UUIDField()
    pickup_date = serializers.DateField()
    pickup_time = serializers.TimeField()
    notes = serializers.CharField(
        required=False,
        allow_blank=True,
        default="",
        max_length=settings.ORDER_NOTES_MAX_LENGTH,
    )

    def validate_pickup_date(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError("Pickup date cannot be in the past")
        return value


class CreateOrderInputSerializer(_PickupInputSerializer):
    pass


class BuyNowInputSerializer(_PickupInputSerializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CancelOrderInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")


class UpdateOrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class VerifyOTPInputSerializer(serializers.Serializer):
    otp = serializers.CharField(trim_whitespace=True)
