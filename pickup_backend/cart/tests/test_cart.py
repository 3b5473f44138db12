# cart/tests/test_cart.py

from django.test import TestCase

from cart.services.cart_service import (
    InvalidQuantityError,
    OutOfStockError,
    ProductUnavailableError,
    add_item,
    get_active_cart,
    update_item,
)
from core.tests.fixtures import auth_client, make_product, make_store, make_user
from products.models import Product


class CartServiceTests(TestCase):
    """
    GUARANTEES:
    - Stored quantity never exceeds product stock
    - Re-adding a product sums then clamps
    - Unavailable products never enter the cart
    """

    def setUp(self):
        self.user = make_user()
        self.store = make_store()
        self.product = make_product(self.store, quantity=5)

    def test_add_clamps_to_stock(self):
        mutation = add_item(user=self.user, product_id=self.product.id, quantity=10)

        self.assertTrue(mutation.clamped)
        self.assertEqual(mutation.requested, 10)
        self.assertEqual(mutation.applied, 5)
        self.assertEqual(mutation.item.quantity, 5)

    def test_adding_existing_line_sums_then_clamps(self):
        add_item(user=self.user, product_id=self.product.id, quantity=3)
        mutation = add_item(user=self.user, product_id=self.product.id, quantity=3)

        self.assertEqual(mutation.requested, 6)
        self.assertEqual(mutation.applied, 5)
        self.assertEqual(get_active_cart(user=self.user).items.count(), 1)

    def test_update_clamps_to_stock(self):
        item = add_item(user=self.user, product_id=self.product.id, quantity=1).item

        mutation = update_item(user=self.user, item_id=item.id, quantity=99)

        self.assertEqual(mutation.applied, 5)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 5)

    def test_out_of_stock_product_is_rejected(self):
        self.product.quantity = 0
        self.product.save()

        with self.assertRaises(OutOfStockError):
            add_item(user=self.user, product_id=self.product.id, quantity=1)

    def test_inactive_product_is_rejected(self):
        self.product.is_active = False
        self.product.save()

        with self.assertRaises(ProductUnavailableError):
            add_item(user=self.user, product_id=self.product.id, quantity=1)

    def test_quantity_below_one_is_rejected(self):
        for qty in (0, -2, "abc", True):
            with self.subTest(qty=qty):
                with self.assertRaises(InvalidQuantityError):
                    add_item(user=self.user, product_id=self.product.id, quantity=qty)

    def test_one_active_cart_per_user(self):
        first = get_active_cart(user=self.user)
        second = get_active_cart(user=self.user)

        self.assertEqual(first.id, second.id)


class CartAPITests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.client = auth_client(self.user)
        self.store = make_store()
        self.product = make_product(self.store, price="2.50", quantity=5)

    def test_add_reports_clamp_in_message(self):
        response = self.client.post(
            "/api/user/cart/",
            {"product_id": str(self.product.id), "quantity": 10},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        self.assertTrue(response.data["data"]["clamped"])
        self.assertIn("Only 5 available", response.data["message"])
        self.assertEqual(response.data["data"]["item_count"], 5)
        self.assertEqual(response.data["data"]["total_price"], "12.50")

    def test_update_remove_and_clear(self):
        added = self.client.post(
            "/api/user/cart/",
            {"product_id": str(self.product.id), "quantity": 2},
            format="json",
        )
        item_id = added.data["data"]["items"][0]["id"]
        self.assertFalse(added.data["data"]["clamped"])

        updated = self.client.put(f"/api/user/cart/{item_id}/", {"quantity": 3}, format="json")
        self.assertEqual(updated.data["data"]["item_count"], 3)

        removed = self.client.delete(f"/api/user/cart/{item_id}/")
        self.assertEqual(removed.data["data"]["items"], [])

        missing = self.client.delete(f"/api/user/cart/{item_id}/")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.data["code"], "NOT_FOUND")

        cleared = self.client.delete("/api/user/cart/")
        self.assertEqual(cleared.status_code, 200)
        self.assertEqual(cleared.data["data"]["total_price"], "0.00")

    def test_out_of_stock_error_envelope(self):
        self.product.quantity = 0
        self.product.save()

        response = self.client.post(
            "/api/user/cart/",
            {"product_id": str(self.product.id), "quantity": 1},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["code"], "OUT_OF_STOCK")

    def test_zero_quantity_is_a_validation_error(self):
        response = self.client.post(
            "/api/user/cart/",
            {"product_id": str(self.product.id), "quantity": 0},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "VALIDATION_ERROR")
        self.assertIn("quantity", response.data["errors"])

    def test_cart_flags_lines_above_remaining_stock(self):
        add_item(user=self.user, product_id=self.product.id, quantity=4)
        # Stock taken by someone else's checkout after the line was added.
        Product.objects.filter(id=self.product.id).update(quantity=1)

        response = self.client.get("/api/user/cart/")

        self.assertEqual(response.status_code, 200)
        cart = response.data["data"]
        self.assertTrue(cart["has_stock_issues"])
        line = cart["items"][0]
        self.assertEqual(line["quantity"], 4)
        self.assertEqual(line["available_quantity"], 1)
        self.assertTrue(line["exceeds_stock"])

    def test_inactive_product_line_has_nothing_available(self):
        add_item(user=self.user, product_id=self.product.id, quantity=2)
        Product.objects.filter(id=self.product.id).update(is_active=False)

        line = self.client.get("/api/user/cart/").data["data"]["items"][0]

        self.assertEqual(line["available_quantity"], 0)
        self.assertTrue(line["exceeds_stock"])

    def test_cart_within_stock_has_no_issues(self):
        add_item(user=self.user, product_id=self.product.id, quantity=2)

        cart = self.client.get("/api/user/cart/").data["data"]

        self.assertFalse(cart["has_stock_issues"])
        self.assertFalse(cart["items"][0]["exceeds_stock"])
        self.assertEqual(cart["items"][0]["available_quantity"], 5)
