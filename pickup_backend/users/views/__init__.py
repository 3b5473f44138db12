from .admin_users import AdminUserViewSet
from .auth import LoginView, RegisterView, RequestPasswordResetView, ResetPasswordView
from .profile import (
    ChangePasswordView,
    DeleteAccountView,
    ProfileView,
    UpdateProfileView,
    UploadProfilePictureView,
)

__all__ = [
    "AdminUserViewSet",
    "RegisterView",
    "LoginView",
    "RequestPasswordResetView",
    "ResetPasswordView",
    "ProfileView",
    "UpdateProfileView",
    "UploadProfilePictureView",
    "ChangePasswordView",
    "DeleteAccountView",
]
