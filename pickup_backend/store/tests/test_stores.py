# store/tests/test_stores.py

import shutil
import tempfile

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from core.tests.fixtures import (
    PICKUP_TIME,
    auth_client,
    make_admin,
    make_product,
    make_store,
    make_user,
    receipt_file,
    tomorrow,
)
from orders.services.order_service import buy_now
from store.models import Store

MEDIA_ROOT = tempfile.mkdtemp()


class PublicStoreTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.open_store = make_store(name="Downtown", pickup_instructions="Desk 2")
        self.closed_store = make_store(name="Uptown", is_active=False)

    def test_only_active_stores_are_listed(self):
        response = self.client.get("/api/user/stores/")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        self.assertEqual([s["name"] for s in response.data["data"]["results"]], ["Downtown"])
        self.assertEqual(response.data["data"]["results"][0]["pickup_instructions"], "Desk 2")

    def test_closed_store_detail_is_not_found(self):
        response = self.client.get(f"/api/user/stores/{self.closed_store.id}/")

        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.data["success"])


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class AdminStoreTests(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.client = auth_client(make_admin())

    def test_create_store_with_image(self):
        response = self.client.post(
            "/api/admin/stores/",
            {"name": "Harbour", "location": "Pier 3", "image": receipt_file(name="front.gif")},
            format="multipart",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Store created")
        self.assertTrue(response.data["data"]["image_url"].startswith("/media/stores/"))
        self.assertNotIn("image", response.data["data"])

    def test_update_and_deactivate(self):
        store = make_store()

        response = self.client.patch(
            f"/api/admin/stores/{store.id}/", {"is_active": False}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        store.refresh_from_db()
        self.assertFalse(store.is_active)

    def test_store_with_orders_cannot_be_deleted(self):
        store = make_store()
        product = make_product(store)
        buy_now(
            user=make_user(),
            product_id=product.id,
            quantity=1,
            store_id=store.id,
            pickup_date=tomorrow(),
            pickup_time=PICKUP_TIME,
        )

        response = self.client.delete(f"/api/admin/stores/{store.id}/")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "STORE_IN_USE")
        self.assertTrue(Store.objects.filter(id=store.id).exists())

    def test_empty_store_can_be_deleted(self):
        store = make_store()

        response = self.client.delete(f"/api/admin/stores/{store.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Store deleted")
        self.assertFalse(Store.objects.filter(id=store.id).exists())

    def test_buyer_is_forbidden(self):
        client = auth_client(make_user())

        response = client.post("/api/admin/stores/", {"name": "X", "location": "Y"}, format="json")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["code"], "FORBIDDEN")
