from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class AdminUserManagementTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role=User.ROLE_ADMIN
        )
        self.user = User.objects.create_user(email="user@example.com", password="pass")

    def test_non_admin_is_forbidden(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.get("/api/admin/users/")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["code"], "FORBIDDEN")

    def test_admin_lists_users(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get("/api/admin/users/")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        emails = {row["email"] for row in response.data["data"]["results"]}
        self.assertEqual(emails, {"admin@example.com", "user@example.com"})

    def test_admin_creates_admin_user(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(
            "/api/admin/users/",
            {
                "email": "second-admin@example.com",
                "password": "Second-Admin-2024",
                "role": "ADMIN",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        created = User.objects.get(email="second-admin@example.com")
        self.assertEqual(created.role, User.ROLE_ADMIN)
        self.assertTrue(created.is_staff)

    def test_admin_cannot_delete_self(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f"/api/admin/users/{self.admin.id}/")

        self.assertEqual(response.status_code, 400)
        self.assertTrue(User.objects.filter(id=self.admin.id).exists())

    def test_admin_deletes_user(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f"/api/admin/users/{self.user.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        self.assertFalse(User.objects.filter(id=self.user.id).exists())
