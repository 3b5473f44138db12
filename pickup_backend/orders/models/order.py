# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from store.models import Store


class Order(models.Model):
    """
    Click-and-collect order.

    Lifecycle (see orders.services.order_lifecycle for the enforced table):
    - created PENDING / payment PENDING at checkout (stock reserved)
    - PENDING -> CONFIRMED only when an admin verifies the payment receipt;
      this is also when the pickup OTP is issued
    - CONFIRMED -> READY_FOR_COLLECTION by an admin
    - READY_FOR_COLLECTION -> COLLECTED only with the buyer's OTP
    - CANCELLED from PENDING/CONFIRMED releases the reserved stock
    """

    STATUS_PENDING = "PENDING"
    STATUS_CONFIRMED = "CONFIRMED"
    STATUS_READY_FOR_COLLECTION = "READY_FOR_COLLECTION"
    STATUS_COLLECTED = "COLLECTED"
    STATUS_CANCELLED = "CANCELLED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_READY_FOR_COLLECTION, "Ready for collection"),
        (STATUS_COLLECTED, "Collected"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_PENDING = "PENDING"
    PAYMENT_VERIFIED = "VERIFIED"
    PAYMENT_FAILED = "FAILED"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_VERIFIED, "Verified"),
        (PAYMENT_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(
        max_length=32,
        unique=True,
        blank=True,
        help_text="System-generated public order number",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    store = models.ForeignKey(Store, on_delete=models.PROTECT, related_name="orders")

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    pickup_date = models.DateField()
    pickup_time = models.TimeField()
    notes = models.TextField(blank=True, default="")

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_status = models.CharField(
        max_length=16, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING
    )

    # Pickup code; issued on payment verification, presented at collection.
    otp = models.CharField(max_length=12, blank=True, default="")
    otp_issued_at = models.DateTimeField(null=True, blank=True)

    cancel_reason = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    collected_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["store", "status"], name="orders_store_status_idx"),
            models.Index(fields=["user", "created_at"], name="orders_user_created_idx"),
            models.Index(fields=["status", "pickup_date"], name="orders_status_pickup_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.order_number:
            prefix = timezone.now().strftime("ORD%Y%m%d")
            self.order_number = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} | {self.total_amount} | {self.status}"
