# orders/models/payment.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.images import validate_image_extension


def receipt_upload_path(instance, filename):
    return f"receipts/{instance.order_id}/{filename}"


class Payment(models.Model):
    """
    A receipt submission against an order, reviewed by an admin.

    Rules:
    - at most one PENDING record per order at any time
    - a REJECTED record stays for audit; the buyer resubmits as a new record
    - the most recent submission is the order's "current" payment
    """

    STATUS_PENDING = "PENDING"
    STATUS_VERIFIED = "VERIFIED"
    STATUS_REJECTED = "REJECTED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_VERIFIED, "Verified"),
        (STATUS_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey("orders.Order", on_delete=models.CASCADE, related_name="payments")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments",
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    payment_method = models.CharField(max_length=64, blank=True, default="")
    receipt_image = models.FileField(
        upload_to=receipt_upload_path, validators=[validate_image_extension]
    )
    notes = models.TextField(blank=True, default="")

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    verification_notes = models.TextField(blank=True, default="")
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_payments",
    )
    verified_at = models.DateTimeField(null=True, blank=True)

    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-submitted_at"]
        indexes = [
            models.Index(fields=["status"], name="payments_status_idx"),
            models.Index(fields=["order", "submitted_at"], name="payments_order_submitted_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["order"],
                condition=models.Q(status="PENDING"),
                name="one_pending_payment_per_order",
            ),
        ]

    def mark_reviewed(self, *, status: str, reviewer, notes: str = ""):
        self.status = status
        self.verified_by = reviewer
        self.verification_notes = notes
        self.verified_at = self.verified_at or timezone.now()

    def __str__(self):
        return f"Payment {self.id} | {self.order_id} | {self.status}"
