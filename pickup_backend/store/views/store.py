# store/views/store.py

"""
STORE VIEWSETS

- PublicStoreViewSet: active stores only, read-only, AllowAny
  GET /api/user/stores/  and  /api/user/stores/<id>/
- AdminStoreViewSet: full CRUD, ADMIN only
  /api/admin/stores/
"""

from django.db.models.deletion import ProtectedError
from rest_framework import filters, status, viewsets
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny

from core.responses import EnvelopeMixin, error_response
from permissions.roles import IsAdmin
from store.models import Store
from store.serializers import StoreSerializer


class PublicStoreViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Store.objects.filter(is_active=True).order_by("name")
    serializer_class = StoreSerializer
    permission_classes = [AllowAny]
    filter_backends = [filters.SearchFilter]
    search_fields = ["name", "location"]


class AdminStoreViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    queryset = Store.objects.all().order_by("name")
    serializer_class = StoreSerializer
    permission_classes = [IsAdmin]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [filters.SearchFilter]
    search_fields = ["name", "location"]
    envelope_messages = {
        "create": "Store created",
        "update": "Store updated",
        "partial_update": "Store updated",
        "destroy": "Store deleted",
    }

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return error_response(
                code="STORE_IN_USE",
                message="Store has products or orders; deactivate it instead",
                http_status=status.HTTP_409_CONFLICT,
            )
