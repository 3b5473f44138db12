# ratings/tests/test_ratings.py

from django.test import TestCase

from core.tests.fixtures import auth_client, make_product, make_store, make_user
from ratings.models import Rating


class RatingAPITests(TestCase):
    """
    GUARANTEES:
    - One rating per user per product
    - Average is reported to 2 decimal places
    - Only the author may change or delete a rating
    """

    def setUp(self):
        self.store = make_store()
        self.product = make_product(self.store)
        self.alice = make_user(email="alice@example.com")
        self.bob = make_user(email="bob@example.com")
        self.client = auth_client(self.alice)

    def _rate(self, user, value, review=""):
        return Rating.objects.create(product=self.product, user=user, rating=value, review=review)

    def test_create_rating(self):
        response = self.client.post(
            "/api/user/ratings/",
            {"product": str(self.product.id), "rating": 4, "review": "  Fresh  "},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Rating submitted")
        self.assertEqual(response.data["data"]["review"], "Fresh")
        self.assertEqual(response.data["data"]["user"], self.alice.id)

    def test_rating_out_of_range(self):
        for value in (0, 6):
            with self.subTest(value=value):
                response = self.client.post(
                    "/api/user/ratings/",
                    {"product": str(self.product.id), "rating": value},
                    format="json",
                )
                self.assertEqual(response.status_code, 400)
                self.assertIn("rating", response.data["errors"])

    def test_second_rating_for_same_product_is_rejected(self):
        self._rate(self.alice, 5)

        response = self.client.post(
            "/api/user/ratings/",
            {"product": str(self.product.id), "rating": 3},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("product", response.data["errors"])

    def test_product_summary(self):
        self._rate(self.alice, 5)
        self._rate(self.bob, 4)
        self._rate(make_user(email="carol@example.com"), 4)

        response = self.client.get(f"/api/user/ratings/product/{self.product.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["average_rating"], "4.33")
        self.assertEqual(response.data["data"]["total_ratings"], 3)
        self.assertEqual(len(response.data["data"]["ratings"]), 3)

    def test_unrated_product_summary(self):
        response = self.client.get(f"/api/user/ratings/product/{self.product.id}/")

        self.assertEqual(response.data["data"]["average_rating"], "0.00")
        self.assertEqual(response.data["data"]["total_ratings"], 0)

    def test_update_own_rating(self):
        rating = self._rate(self.alice, 2)

        response = self.client.patch(
            f"/api/user/ratings/{rating.id}/", {"rating": 5}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        rating.refresh_from_db()
        self.assertEqual(rating.rating, 5)

    def test_cannot_edit_or_delete_someone_elses_rating(self):
        rating = self._rate(self.bob, 3)

        edit = self.client.patch(f"/api/user/ratings/{rating.id}/", {"rating": 1}, format="json")
        delete = self.client.delete(f"/api/user/ratings/{rating.id}/")

        self.assertEqual(edit.status_code, 403)
        self.assertEqual(delete.status_code, 403)
        rating.refresh_from_db()
        self.assertEqual(rating.rating, 3)

    def test_list_shows_own_ratings(self):
        self._rate(self.alice, 5)
        self._rate(self.bob, 1)

        response = self.client.get("/api/user/ratings/")

        self.assertEqual(len(response.data["data"]["results"]), 1)
        self.assertEqual(response.data["data"]["results"][0]["rating"], 5)
