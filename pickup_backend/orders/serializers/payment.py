# orders/serializers/payment.py

from decimal import Decimal

from rest_framework import serializers

from core.images import image_url, validate_image_extension
from orders.models import Order, Payment
from users.serializers import UserSummarySerializer


class _PaymentOrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "store",
            "status",
            "payment_status",
            "total_amount",
            "pickup_date",
            "pickup_time",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    order_detail = _PaymentOrderSerializer(source="order", read_only=True)
    user_detail = UserSummarySerializer(source="user", read_only=True)
    receipt_image_url = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "order",
            "order_detail",
            "user",
            "user_detail",
            "amount",
            "payment_method",
            "receipt_image_url",
            "notes",
            "status",
            "verification_notes",
            "verified_at",
            "submitted_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_receipt_image_url(self, obj) -> str | None:
        return image_url(obj.receipt_image)


class SubmitReceiptInputSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    receipt_image = serializers.FileField(validators=[validate_image_extension])
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01"), required=False, allow_null=True
    )
    payment_method = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=64
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ReviewPaymentInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[Payment.STATUS_VERIFIED, Payment.STATUS_REJECTED]
    )
    verification_notes = serializers.CharField(
        required=False, allow_blank=True, default=""
    )
