# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from core.images import validate_image_extension
from store.models import Store

from .category import Category, SubCategory


class Product(models.Model):
    """
    A sellable product held by one store.

    STOCK MODEL:
    - `quantity` is stock on hand at the store
    - checkout reserves stock (decrements) inside the order transaction
    - cancelling an order releases it again
    - carts never reserve; they are clamped to `quantity` instead
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    store = models.ForeignKey(Store, on_delete=models.PROTECT, related_name="products")
    category = models.ForeignKey(
        Category, on_delete=models.PROTECT, related_name="products"
    )
    subcategory = models.ForeignKey(
        SubCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=0)

    image = models.FileField(
        upload_to="products/", blank=True, validators=[validate_image_extension]
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["store", "is_active"], name="products_pr_store_i_8f2c1a_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.store.name})"

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError({"price": "Price must be greater than zero"})

        if (
            self.subcategory_id
            and self.category_id
            and self.subcategory.category_id != self.category_id
        ):
            raise ValidationError(
                {"subcategory": "Subcategory does not belong to the selected category"}
            )

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0
