# core/tests/fixtures.py

"""
Shared builders for the per-app test suites.
"""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from products.models import Category, Product
from store.models import Store

User = get_user_model()

PASSWORD = "Pickup-Pass-2024"

# Smallest valid GIF; content is never decoded, only the extension is checked.
GIF_BYTES = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04"
    b"\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
)


def make_user(email="buyer@example.com", **extra):
    extra.setdefault("full_name", "Jo Buyer")
    return User.objects.create_user(email=email, password=PASSWORD, **extra)


def make_admin(email="admin@example.com", **extra):
    extra.setdefault("full_name", "Store Admin")
    return User.objects.create_user(
        email=email, password=PASSWORD, role=User.ROLE_ADMIN, **extra
    )


def make_store(name="Downtown", **extra):
    extra.setdefault("location", "1 Market Street")
    return Store.objects.create(name=name, **extra)


def make_product(store, name="Orange Juice", price="3.50", quantity=10, category=None, **extra):
    if category is None:
        category, _ = Category.objects.get_or_create(name="Groceries")
    return Product.objects.create(
        store=store,
        category=category,
        name=name,
        price=Decimal(price),
        quantity=quantity,
        **extra,
    )


def auth_client(user) -> APIClient:
    client = APIClient()
    token = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.access_token}")
    return client


def receipt_file(name="receipt.gif"):
    return SimpleUploadedFile(name, GIF_BYTES, content_type="image/gif")


def tomorrow():
    return timezone.localdate() + timedelta(days=1)


PICKUP_TIME = time(10, 30)
