"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .category import Category, SubCategory
from .product import Product

__all__ = [
    "Category",
    "SubCategory",
    "Product",
]
