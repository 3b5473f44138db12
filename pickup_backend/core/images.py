# core/images.py

"""
IMAGE HELPERS

Images (receipts, products, categories, stores, profile pictures) are stored
as relative paths. Clients get URLs resolved against IMAGE_BASE_URL, falling
back to MEDIA_URL when no base is configured (dev/tests).
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import FileExtensionValidator

IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "webp", "gif"]

validate_image_extension = FileExtensionValidator(allowed_extensions=IMAGE_EXTENSIONS)


def image_url(file_field) -> str | None:
    if not file_field:
        return None

    name = str(getattr(file_field, "name", "") or "").lstrip("/")
    if not name:
        return None

    base = (getattr(settings, "IMAGE_BASE_URL", "") or "").strip()
    if base:
        return f"{base.rstrip('/')}/{name}"

    media_url = (getattr(settings, "MEDIA_URL", "") or "media/").strip("/")
    return f"/{media_url}/{name}"
