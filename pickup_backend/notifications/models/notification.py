# notifications/models/notification.py

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class Notification(models.Model):
    """
    In-app notification for one user.

    Delivered by polling (list / unread count); there is no push channel.
    `data` carries pickup details for the client to render, e.g.
    {"otp": "123456", "pickup_date": "2024-05-01", "pickup_time": "10:00"}.
    """

    TYPE_ORDER_CREATED = "ORDER_CREATED"
    TYPE_PAYMENT_VERIFIED = "PAYMENT_VERIFIED"
    TYPE_ORDER_CONFIRMED = "ORDER_CONFIRMED"
    TYPE_READY_FOR_COLLECTION = "READY_FOR_COLLECTION"
    TYPE_COLLECTION_REMINDER = "COLLECTION_REMINDER"
    TYPE_ORDER_COLLECTED = "ORDER_COLLECTED"
    TYPE_ORDER_CANCELLED = "ORDER_CANCELLED"
    TYPE_PAYMENT_REJECTED = "PAYMENT_REJECTED"

    TYPE_CHOICES = [
        (TYPE_ORDER_CREATED, "Order created"),
        (TYPE_PAYMENT_VERIFIED, "Payment verified"),
        (TYPE_ORDER_CONFIRMED, "Order confirmed"),
        (TYPE_READY_FOR_COLLECTION, "Ready for collection"),
        (TYPE_COLLECTION_REMINDER, "Collection reminder"),
        (TYPE_ORDER_COLLECTED, "Order collected"),
        (TYPE_ORDER_CANCELLED, "Order cancelled"),
        (TYPE_PAYMENT_REJECTED, "Payment rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notif_user_read_idx"),
            models.Index(fields=["user", "created_at"], name="notif_user_created_idx"),
        ]

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()

    def __str__(self):
        return f"{self.type} -> {self.user} ({'read' if self.is_read else 'unread'})"
