# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/:

- /api/auth/      register, login, JWT refresh, profile, password reset
- /api/products/  public catalog (AllowAny)
- /api/user/      authenticated USER or ADMIN: stores, categories, cart,
                  orders, payments, ratings, notifications
- /api/admin/     ADMIN only: users, stores, catalog, orders, payments

Operational:
- /api/health/ (AllowAny) checks DB connectivity.
- Django admin path is configurable via ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from cart.urls import public_urlpatterns as cart_public
from notifications.urls import public_urlpatterns as notifications_public
from orders.urls import admin_urlpatterns as orders_admin
from orders.urls import public_urlpatterns as orders_public
from products.urls import admin_urlpatterns as products_admin
from products.urls import catalog_urlpatterns
from products.urls import public_urlpatterns as products_public
from ratings.urls import public_urlpatterns as ratings_public
from store.urls import admin_urlpatterns as store_admin
from store.urls import public_urlpatterns as store_public
from users.urls import admin_urlpatterns as users_admin


# ------------------ API ROOT (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": {"type": "object"},
            },
        }
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "success": True,
            "message": "Pickup Backend API is running",
            "data": {
                "auth": {
                    "register": "/api/auth/register/",
                    "login": "/api/auth/login/",
                    "jwt_refresh": "/api/auth/jwt/refresh/",
                    "profile": "/api/auth/profile/",
                },
                "docs": {
                    "swagger": "/api/docs/",
                    "schema": "/api/schema/",
                },
                "modules": {
                    "catalog": "/api/products/",
                    "user": "/api/user/",
                    "admin": "/api/admin/",
                },
            },
        }
    )


# ------------------ HEALTH CHECK (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
            },
        },
        503: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
                "error": {"type": "string"},
            },
        },
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Minimal operational endpoint:
    - Confirms app is responding
    - Confirms DB connection + simple query works
    """
    try:
        conn = connections["default"]
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
        return Response({"status": "ok", "db": "ok"})
    except OperationalError as e:
        return Response(
            {"status": "degraded", "db": "down", "error": str(e)}, status=503
        )


# ------------------ ADMIN PATH (HARDENED) ------------------
# Keep the trailing slash. Do not publish a custom path in client docs.
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ ROLE-GATED GROUPS ------------------
# Order matters only where prefixes overlap: the store-orders route sits
# under stores/<id>/ and must not be shadowed by the store router.
user_urlpatterns = (
    store_public
    + products_public
    + cart_public
    + orders_public
    + ratings_public
    + notifications_public
)

admin_urlpatterns = users_admin + orders_admin + store_admin + products_admin


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Auth & profile
    path("auth/", include("users.urls")),
    # Public catalog
    path("products/", include(catalog_urlpatterns)),
    # Role groups
    path("user/", include(user_urlpatterns)),
    path("admin/", include(admin_urlpatterns)),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    # Visiting / takes you to Swagger docs
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
