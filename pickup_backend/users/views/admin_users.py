# users/views/admin_users.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models.deletion import ProtectedError
from rest_framework import filters, status, viewsets

from core.responses import EnvelopeMixin, error_response
from permissions.roles import IsAdmin
from users.serializers import AdminUserWriteSerializer, UserSerializer

User = get_user_model()


class AdminUserViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """
    ADMIN user management: list / retrieve / create / update / delete.
    """

    permission_classes = [IsAdmin]
    queryset = User.objects.order_by("-created_at")
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["email", "full_name", "phone_number"]
    ordering_fields = ["created_at", "email"]
    envelope_messages = {
        "create": "User created",
        "update": "User updated",
        "partial_update": "User updated",
        "destroy": "User deleted",
    }

    def get_serializer_class(self):
        if self.action in {"create", "update", "partial_update"}:
            return AdminUserWriteSerializer
        return UserSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        role = (self.request.query_params.get("role") or "").strip().upper()
        if role:
            qs = qs.filter(role=role)
        return qs

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return error_response(
                code="CANNOT_DELETE_SELF",
                message="Use delete-account to remove your own account",
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return error_response(
                code="USER_HAS_ORDERS",
                message="User has orders and cannot be deleted; deactivate instead",
                http_status=status.HTTP_409_CONFLICT,
            )
