# core/management/commands/seed_demo.py

"""
PATH: core/management/commands/seed_demo.py

Local/demo bootstrap (idempotent):
- one ADMIN and one USER account
- one store with categories, subcategories and stocked products

Passwords come from --password (default: a dev-only value). Never run
against production data.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_USER
from products.models import Category, Product, SubCategory
from store.models import Store


@dataclass(frozen=True)
class DemoProduct:
    name: str
    category: str
    subcategory: str
    price: Decimal
    quantity: int


DEMO_USERS = [
    ("admin@example.com", "Demo Admin", ROLE_ADMIN),
    ("user@example.com", "Demo Buyer", ROLE_USER),
]

DEMO_CATALOG = {
    "Groceries": ["Beverages", "Snacks"],
    "Household": ["Cleaning"],
}

DEMO_PRODUCTS = [
    DemoProduct("Orange Juice 1L", "Groceries", "Beverages", Decimal("3.50"), 40),
    DemoProduct("Sparkling Water 6-pack", "Groceries", "Beverages", Decimal("4.20"), 25),
    DemoProduct("Salted Crisps", "Groceries", "Snacks", Decimal("1.80"), 60),
    DemoProduct("Dish Soap", "Household", "Cleaning", Decimal("2.75"), 15),
]


class Command(BaseCommand):
    help = "Seed demo users, a store and a small catalog (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="Pickup-Demo-2024", help="Password for seeded users.")
        parser.add_argument("--store-name", default="Downtown Store")

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]
        User = get_user_model()

        for email, full_name, role in DEMO_USERS:
            user = User.objects.filter(email=email).first()
            if user is None:
                User.objects.create_user(
                    email=email, password=password, full_name=full_name, role=role
                )
                self.stdout.write(self.style.SUCCESS(f"Created {role}: {email}"))
            else:
                self.stdout.write(f"Exists {role}: {email}")

        store, created = Store.objects.get_or_create(
            name=options["store_name"],
            defaults={
                "location": "1 Market Street",
                "pickup_instructions": "Collect at the customer service desk.",
            },
        )
        self.stdout.write(f"{'Created' if created else 'Exists'} store: {store.name}")

        subcategories = {}
        for category_name, sub_names in DEMO_CATALOG.items():
            category, _ = Category.objects.get_or_create(name=category_name)
            for sub_name in sub_names:
                sub, _ = SubCategory.objects.get_or_create(category=category, name=sub_name)
                subcategories[(category_name, sub_name)] = sub

        for item in DEMO_PRODUCTS:
            sub = subcategories[(item.category, item.subcategory)]
            _, created = Product.objects.get_or_create(
                store=store,
                name=item.name,
                defaults={
                    "category": sub.category,
                    "subcategory": sub,
                    "price": item.price,
                    "quantity": item.quantity,
                },
            )
            if created:
                self.stdout.write(f"Created product: {item.name}")

        self.stdout.write(self.style.SUCCESS("Demo data ready."))
