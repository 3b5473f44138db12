# notifications/urls.py

from django.urls import path

from notifications.views import (
    MarkAllReadView,
    MarkReadView,
    NotificationDetailView,
    NotificationListView,
    UnreadCountView,
)

public_urlpatterns = [
    path("notifications/", NotificationListView.as_view(), name="notifications"),
    path(
        "notifications/unread/count/",
        UnreadCountView.as_view(),
        name="notifications-unread-count",
    ),
    path(
        "notifications/mark-all/read/",
        MarkAllReadView.as_view(),
        name="notifications-mark-all-read",
    ),
    path(
        "notifications/<uuid:notification_id>/read/",
        MarkReadView.as_view(),
        name="notification-read",
    ),
    path(
        "notifications/<uuid:notification_id>/",
        NotificationDetailView.as_view(),
        name="notification-detail",
    ),
]
