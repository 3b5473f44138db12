# products/views/product.py

"""
PRODUCT VIEWSETS

Admin (/api/admin/products/):
- CRUD (multipart for images)
- GET store/<store_id>/ : all products of one store, active or not

Public (/api/products/):
- GET <id>/                                      : active product detail
- GET store/<store_id>/                          : active products of a store
- GET store/<store_id>/category/<category_id>/
- GET store/<store_id>/subcategory/<subcategory_id>/

Public listings accept ?search=<text> (name/description) and the
ProductFilter params (min_price, max_price, in_stock).
"""

from django.db.models.deletion import ProtectedError
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny

from core.responses import EnvelopeMixin, error_response, success_response
from permissions.roles import IsAdmin
from products.filters import ProductFilter
from products.models import Product
from products.serializers import ProductSerializer
from store.models import Store

SEARCH_PARAM = OpenApiParameter(
    name="search", type=str, required=False, description="Match name or description"
)


class _ProductListingMixin:
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = ProductFilter
    search_fields = ["name", "description"]
    ordering_fields = ["price", "name", "created_at"]

    def _listing(self, qs):
        qs = self.filter_queryset(qs)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return success_response(data=self.get_serializer(qs, many=True).data)


class PublicProductViewSet(_ProductListingMixin, EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        return (
            Product.objects.select_related("store", "category", "subcategory")
            .filter(is_active=True, store__is_active=True)
            .order_by("-created_at")
        )

    @extend_schema(parameters=[SEARCH_PARAM], responses={200: ProductSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path=r"store/(?P<store_id>[^/.]+)")
    def by_store(self, request, store_id=None):
        store = get_object_or_404(Store, pk=store_id, is_active=True)
        return self._listing(self.get_queryset().filter(store=store))

    @extend_schema(parameters=[SEARCH_PARAM], responses={200: ProductSerializer(many=True)})
    @action(
        detail=False,
        methods=["get"],
        url_path=r"store/(?P<store_id>[^/.]+)/category/(?P<category_id>[^/.]+)",
    )
    def by_store_and_category(self, request, store_id=None, category_id=None):
        store = get_object_or_404(Store, pk=store_id, is_active=True)
        return self._listing(
            self.get_queryset().filter(store=store, category_id=category_id)
        )

    @extend_schema(parameters=[SEARCH_PARAM], responses={200: ProductSerializer(many=True)})
    @action(
        detail=False,
        methods=["get"],
        url_path=r"store/(?P<store_id>[^/.]+)/subcategory/(?P<subcategory_id>[^/.]+)",
    )
    def by_store_and_subcategory(self, request, store_id=None, subcategory_id=None):
        store = get_object_or_404(Store, pk=store_id, is_active=True)
        return self._listing(
            self.get_queryset().filter(store=store, subcategory_id=subcategory_id)
        )


class AdminProductViewSet(_ProductListingMixin, EnvelopeMixin, viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [IsAdmin]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    envelope_messages = {
        "create": "Product created",
        "update": "Product updated",
        "partial_update": "Product updated",
        "destroy": "Product deleted",
    }

    def get_queryset(self):
        return Product.objects.select_related(
            "store", "category", "subcategory"
        ).order_by("-created_at")

    @extend_schema(responses={200: ProductSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path=r"store/(?P<store_id>[^/.]+)")
    def by_store(self, request, store_id=None):
        store = get_object_or_404(Store, pk=store_id)
        return self._listing(self.get_queryset().filter(store=store))

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return error_response(
                code="PRODUCT_IN_USE",
                message="Product appears on orders; deactivate it instead",
                http_status=status.HTTP_409_CONFLICT,
            )
