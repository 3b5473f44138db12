# products/views/__init__.py

from .category import AdminCategoryViewSet, AdminSubCategoryViewSet, PublicCategoryViewSet
from .product import AdminProductViewSet, PublicProductViewSet

__all__ = [
    "AdminCategoryViewSet",
    "AdminSubCategoryViewSet",
    "PublicCategoryViewSet",
    "AdminProductViewSet",
    "PublicProductViewSet",
]
