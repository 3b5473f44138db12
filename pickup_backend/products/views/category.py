# products/views/category.py

from django.db.models.deletion import ProtectedError
from drf_spectacular.utils import extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny

from core.responses import EnvelopeMixin, error_response, success_response
from permissions.roles import IsAdmin
from products.models import Category, SubCategory
from products.serializers import CategorySerializer, SubCategorySerializer


class PublicCategoryViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    """
    Category browsing for the storefront (subcategories nested).
    """

    queryset = Category.objects.prefetch_related("subcategories").order_by("name")
    serializer_class = CategorySerializer
    permission_classes = [AllowAny]


class AdminCategoryViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """
    Category API (ADMIN)

    Deleting a category that still has products is refused; its subcategories
    go with it.
    """

    queryset = Category.objects.prefetch_related("subcategories").order_by("name")
    serializer_class = CategorySerializer
    permission_classes = [IsAdmin]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [filters.SearchFilter]
    search_fields = ["name"]
    envelope_messages = {
        "create": "Category created",
        "update": "Category updated",
        "partial_update": "Category updated",
        "destroy": "Category deleted",
    }

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return error_response(
                code="CATEGORY_IN_USE",
                message="Category still has products",
                http_status=status.HTTP_409_CONFLICT,
            )


class AdminSubCategoryViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    queryset = SubCategory.objects.select_related("category").order_by("name")
    serializer_class = SubCategorySerializer
    permission_classes = [IsAdmin]
    envelope_messages = {
        "create": "Subcategory created",
        "update": "Subcategory updated",
        "partial_update": "Subcategory updated",
        "destroy": "Subcategory deleted",
    }

    @extend_schema(responses={200: SubCategorySerializer(many=True)})
    @action(
        detail=False,
        methods=["get"],
        url_path=r"category/(?P<category_id>[^/.]+)",
    )
    def by_category(self, request, category_id=None):
        """
        GET /api/admin/subcategories/category/<category_id>/
        """
        category = get_object_or_404(Category, pk=category_id)
        qs = self.get_queryset().filter(category=category)
        return success_response(data=self.get_serializer(qs, many=True).data)
