# notifications/tests/test_notifications.py

from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from core.tests.fixtures import auth_client, make_user
from notifications.models import Notification
from notifications.services import notify, send_collection_reminders
from orders.models import Order
from orders.tests.base import OrderTestCase


def _make(user, title="Hello", **extra):
    return notify(
        user=user,
        notification_type=Notification.TYPE_ORDER_CREATED,
        title=title,
        message=f"{title} message",
        **extra,
    )


class NotificationAPITests(TestCase):
    """
    GUARANTEES:
    - Users only ever see and touch their own notifications
    - Unread count reflects read state
    - List honours `limit`
    """

    def setUp(self):
        self.user = make_user()
        self.client = auth_client(self.user)

    def test_list_newest_first_with_limit(self):
        for i in range(3):
            _make(self.user, title=f"n{i}")
        _make(make_user(email="other@example.com"), title="not mine")

        response = self.client.get("/api/user/notifications/", {"limit": 2})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        self.assertEqual(len(response.data["data"]), 2)
        titles = {n["title"] for n in response.data["data"]}
        self.assertNotIn("not mine", titles)

    def test_invalid_limit(self):
        response = self.client.get("/api/user/notifications/", {"limit": "zero"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "VALIDATION_ERROR")

    @override_settings(NOTIFICATION_LIST_MAX_LIMIT=2)
    def test_limit_is_capped(self):
        for i in range(3):
            _make(self.user, title=f"n{i}")

        response = self.client.get("/api/user/notifications/", {"limit": 500})

        self.assertEqual(len(response.data["data"]), 2)

    def test_unread_count_and_mark_read(self):
        first = _make(self.user)
        _make(self.user)

        count = self.client.get("/api/user/notifications/unread/count/")
        self.assertEqual(count.data["data"], {"unread_count": 2})

        marked = self.client.put(f"/api/user/notifications/{first.id}/read/")
        self.assertEqual(marked.status_code, 200)
        self.assertTrue(marked.data["data"]["is_read"])
        self.assertIsNotNone(marked.data["data"]["read_at"])

        count = self.client.get("/api/user/notifications/unread/count/")
        self.assertEqual(count.data["data"]["unread_count"], 1)

        unread_only = self.client.get("/api/user/notifications/", {"unread": "true"})
        self.assertEqual(len(unread_only.data["data"]), 1)

    def test_mark_all_read(self):
        _make(self.user)
        _make(self.user)

        response = self.client.put("/api/user/notifications/mark-all/read/")

        self.assertEqual(response.data["data"], {"updated": 2})
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())

    def test_delete_own_only(self):
        mine = _make(self.user)
        theirs = _make(make_user(email="other@example.com"))

        blocked = self.client.delete(f"/api/user/notifications/{theirs.id}/")
        self.assertEqual(blocked.status_code, 404)
        self.assertTrue(Notification.objects.filter(id=theirs.id).exists())

        deleted = self.client.delete(f"/api/user/notifications/{mine.id}/")
        self.assertEqual(deleted.status_code, 200)
        self.assertFalse(Notification.objects.filter(id=mine.id).exists())


class CollectionReminderTests(OrderTestCase):
    def setUp(self):
        super().setUp()
        self.ready = self.make_ready(self.place())
        Order.objects.filter(id=self.ready.id).update(pickup_date=timezone.localdate())

    def _reminders(self):
        return Notification.objects.filter(type=Notification.TYPE_COLLECTION_REMINDER)

    def test_reminds_ready_orders_due_today_once(self):
        self.assertEqual(send_collection_reminders(), 1)
        self.assertEqual(send_collection_reminders(), 0)

        reminder = self._reminders().get()
        self.assertEqual(reminder.order_id, self.ready.id)
        self.assertEqual(reminder.user, self.buyer)
        self.assertEqual(reminder.data["otp"], self.ready.otp)

    def test_skips_orders_not_due_or_not_ready(self):
        Order.objects.filter(id=self.ready.id).update(
            pickup_date=timezone.localdate() + timedelta(days=1)
        )
        self.place()

        self.assertEqual(send_collection_reminders(), 0)

    def test_dry_run_creates_nothing(self):
        self.assertEqual(send_collection_reminders(dry_run=True), 1)
        self.assertFalse(self._reminders().exists())

    def test_management_command(self):
        out = StringIO()

        call_command("send_collection_reminders", stdout=out)

        self.assertIn("1 collection reminder(s) sent", out.getvalue())
        self.assertEqual(self._reminders().count(), 1)
