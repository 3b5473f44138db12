# notifications/views.py

"""
NOTIFICATION API (/api/user/notifications/)

GET    notifications/?limit=N&unread=true   newest first
GET    notifications/unread/count/          {"unread_count": N}
PUT    notifications/<id>/read/
PUT    notifications/mark-all/read/
DELETE notifications/<id>/

Clients poll the list / count endpoints; they share the
"notification_poll" throttle scope.
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView

from core.responses import error_response, success_response
from notifications.models import Notification
from notifications.serializers import NotificationSerializer
from notifications.services import mark_all_read, unread_for
from permissions.roles import IsUserOrAdmin


def _parse_limit(raw) -> int:
    if raw in (None, ""):
        return settings.NOTIFICATION_LIST_LIMIT
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({"limit": ["limit must be a positive integer"]})
    if limit < 1:
        raise ValidationError({"limit": ["limit must be a positive integer"]})
    return min(limit, settings.NOTIFICATION_LIST_MAX_LIMIT)


def _not_found():
    return error_response(
        code="NOT_FOUND",
        message="Notification not found",
        http_status=status.HTTP_404_NOT_FOUND,
    )


class NotificationListView(APIView):
    permission_classes = [IsUserOrAdmin]
    throttle_scope = "notification_poll"

    @extend_schema(
        parameters=[
            OpenApiParameter("limit", int, required=False),
            OpenApiParameter("unread", bool, required=False),
        ],
        responses={200: NotificationSerializer(many=True)},
    )
    def get(self, request):
        limit = _parse_limit(request.query_params.get("limit"))

        qs = Notification.objects.filter(user=request.user).select_related("order")
        if (request.query_params.get("unread") or "").lower() in ("1", "true", "yes"):
            qs = qs.filter(is_read=False)

        notifications = qs.order_by("-created_at")[:limit]
        return success_response(data=NotificationSerializer(notifications, many=True).data)


class UnreadCountView(APIView):
    permission_classes = [IsUserOrAdmin]
    throttle_scope = "notification_poll"

    def get(self, request):
        return success_response(data={"unread_count": unread_for(request.user).count()})


class MarkReadView(APIView):
    permission_classes = [IsUserOrAdmin]

    @extend_schema(request=None, responses={200: NotificationSerializer})
    def put(self, request, notification_id):
        notification = Notification.objects.filter(
            id=notification_id, user=request.user
        ).first()
        if notification is None:
            return _not_found()

        if not notification.is_read:
            notification.mark_read()
            notification.save(update_fields=["is_read", "read_at"])

        return success_response(
            data=NotificationSerializer(notification).data,
            message="Notification marked as read",
        )

    patch = put


class MarkAllReadView(APIView):
    permission_classes = [IsUserOrAdmin]

    @extend_schema(request=None)
    def put(self, request):
        updated = mark_all_read(request.user)
        return success_response(
            data={"updated": updated},
            message="All notifications marked as read",
        )

    patch = put


class NotificationDetailView(APIView):
    permission_classes = [IsUserOrAdmin]

    def delete(self, request, notification_id):
        deleted, _ = Notification.objects.filter(
            id=notification_id, user=request.user
        ).delete()
        if not deleted:
            return _not_found()
        return success_response(data=None, message="Notification deleted")
