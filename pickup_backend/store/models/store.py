# store/models/store.py

import uuid

from django.db import models

from core.images import validate_image_extension


class Store(models.Model):
    """
    A physical pickup location.

    The storefront's "selected store" scopes which products a shopper sees
    and which store an order is collected from.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True)
    pickup_instructions = models.TextField(blank=True)
    image = models.FileField(
        upload_to="stores/", blank=True, validators=[validate_image_extension]
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
