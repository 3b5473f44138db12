# products/urls.py

"""
PRODUCTS URLS

- catalog_urlpatterns   -> /api/products/
- public_urlpatterns    -> /api/user/   (categories)
- admin_urlpatterns     -> /api/admin/  (categories, subcategories, products)
"""

from rest_framework.routers import SimpleRouter

from products.views import (
    AdminCategoryViewSet,
    AdminProductViewSet,
    AdminSubCategoryViewSet,
    PublicCategoryViewSet,
    PublicProductViewSet,
)

catalog_router = SimpleRouter()
catalog_router.register(r"", PublicProductViewSet, basename="public-products")

public_router = SimpleRouter()
public_router.register(r"categories", PublicCategoryViewSet, basename="public-categories")

admin_router = SimpleRouter()
admin_router.register(r"categories", AdminCategoryViewSet, basename="admin-categories")
admin_router.register(
    r"subcategories", AdminSubCategoryViewSet, basename="admin-subcategories"
)
admin_router.register(r"products", AdminProductViewSet, basename="admin-products")

catalog_urlpatterns = catalog_router.urls
public_urlpatterns = public_router.urls
admin_urlpatterns = admin_router.urls
