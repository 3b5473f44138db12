# users/views/profile.py

from __future__ import annotations

import logging

from django.db.models.deletion import ProtectedError
from drf_spectacular.utils import extend_schema
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.responses import success_response
from users.serializers import (
    ChangePasswordSerializer,
    DeleteAccountSerializer,
    ProfilePictureSerializer,
    UpdateProfileSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return success_response(data=UserSerializer(request.user).data)


class UpdateProfileView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UpdateProfileSerializer

    def _update(self, request, partial):
        serializer = UpdateProfileSerializer(
            request.user, data=request.data, partial=partial
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success_response(
            data=UserSerializer(user).data, message="Profile updated"
        )

    @extend_schema(request=UpdateProfileSerializer, responses={200: UserSerializer})
    def put(self, request):
        return self._update(request, partial=False)

    @extend_schema(request=UpdateProfileSerializer, responses={200: UserSerializer})
    def patch(self, request):
        return self._update(request, partial=True)


class UploadProfilePictureView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]
    serializer_class = ProfilePictureSerializer

    @extend_schema(request=ProfilePictureSerializer, responses={200: UserSerializer})
    def post(self, request):
        serializer = ProfilePictureSerializer(request.user, data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success_response(
            data=UserSerializer(user).data, message="Profile picture updated"
        )

    put = post


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ChangePasswordSerializer

    @extend_schema(request=ChangePasswordSerializer, responses={200: dict})
    def post(self, request):
        serializer = ChangePasswordSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password", "updated_at"])

        logger.info("Password changed", extra={"user_id": str(user.id)})
        return success_response(message="Password changed successfully")

    put = post


class DeleteAccountView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = DeleteAccountSerializer

    @extend_schema(request=DeleteAccountSerializer, responses={200: dict})
    def delete(self, request):
        serializer = DeleteAccountSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)

        user = request.user
        user_id = str(user.id)

        try:
            user.delete()
        except ProtectedError:
            # Order history must survive; the login is disabled instead.
            user.is_active = False
            user.save(update_fields=["is_active", "updated_at"])
            logger.info("Account deactivated", extra={"user_id": user_id})
            return success_response(message="Account deactivated")

        logger.info("Account deleted", extra={"user_id": user_id})
        return success_response(message="Account deleted")
