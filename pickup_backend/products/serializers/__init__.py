from .category import CategorySerializer, CategorySummarySerializer, SubCategorySerializer
from .product import ProductSerializer, ProductSummarySerializer

__all__ = [
    "CategorySerializer",
    "CategorySummarySerializer",
    "SubCategorySerializer",
    "ProductSerializer",
    "ProductSummarySerializer",
]
