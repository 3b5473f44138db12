# notifications/services.py

"""
NOTIFICATION SERVICE

Single entry point used by the order/payment services to emit in-app
notifications. Callers are usually inside an order transaction, so the
notification commits (or rolls back) together with the state change.
"""

from __future__ import annotations

import logging

from django.db.models import QuerySet
from django.utils import timezone

from notifications.models import Notification
from orders.models import Order

logger = logging.getLogger(__name__)


def notify(*, user, notification_type: str, title: str, message: str, order=None, data=None) -> Notification:
    notification = Notification.objects.create(
        user=user,
        order=order,
        type=notification_type,
        title=title,
        message=message,
        data=data or {},
    )
    logger.info(
        "Notification created",
        extra={
            "notification_id": str(notification.id),
            "type": notification_type,
            "user_id": str(user.pk),
            "order_id": str(order.pk) if order is not None else None,
        },
    )
    return notification


def pickup_data(order, *, include_otp: bool = False) -> dict:
    data = {
        "order_number": order.order_number,
        "pickup_date": order.pickup_date.isoformat() if order.pickup_date else None,
        "pickup_time": order.pickup_time.strftime("%H:%M") if order.pickup_time else None,
    }
    if include_otp and order.otp:
        data["otp"] = order.otp
    return data


def unread_for(user) -> QuerySet:
    return Notification.objects.filter(user=user, is_read=False)


def mark_all_read(user) -> int:
    return unread_for(user).update(is_read=True, read_at=timezone.now())


def send_collection_reminders(*, on_date=None, dry_run: bool = False) -> int:
    """
    Remind buyers whose READY_FOR_COLLECTION orders are due for pickup on
    `on_date` (default: today). An order gets at most one reminder per day.
    Returns the number of orders reminded (or that would be, on a dry run).
    """
    today = on_date or timezone.localdate()
    already_reminded = Notification.objects.filter(
        type=Notification.TYPE_COLLECTION_REMINDER,
        created_at__date=timezone.localdate(),
        order__isnull=False,
    ).values("order_id")

    due = (
        Order.objects.filter(status=Order.STATUS_READY_FOR_COLLECTION, pickup_date=today)
        .exclude(id__in=already_reminded)
        .select_related("user", "store")
    )

    sent = 0
    for order in due:
        sent += 1
        if dry_run:
            continue
        notify(
            user=order.user,
            notification_type=Notification.TYPE_COLLECTION_REMINDER,
            title="Pickup reminder",
            message=(
                f"Order {order.order_number} is waiting for you at {order.store.name} "
                f"today at {order.pickup_time.strftime('%H:%M')}."
            ),
            order=order,
            data=pickup_data(order, include_otp=True),
        )

    logger.info(
        "Collection reminders processed",
        extra={"pickup_date": today.isoformat(), "count": sent, "dry_run": dry_run},
    )
    return sent
