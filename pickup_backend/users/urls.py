# users/urls.py

from django.urls import path
from rest_framework.routers import SimpleRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    AdminUserViewSet,
    ChangePasswordView,
    DeleteAccountView,
    LoginView,
    ProfileView,
    RegisterView,
    RequestPasswordResetView,
    ResetPasswordView,
    UpdateProfileView,
    UploadProfilePictureView,
)

app_name = "users"

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path(
        "request-password-reset/",
        RequestPasswordResetView.as_view(),
        name="request-password-reset",
    ),
    path("reset-password/", ResetPasswordView.as_view(), name="reset-password"),
    # ---------------- AUTHENTICATED ----------------
    path("profile/", ProfileView.as_view(), name="profile"),
    path("update-profile/", UpdateProfileView.as_view(), name="update-profile"),
    path(
        "upload-profile-picture/",
        UploadProfilePictureView.as_view(),
        name="upload-profile-picture",
    ),
    path("change-password/", ChangePasswordView.as_view(), name="change-password"),
    path("delete-account/", DeleteAccountView.as_view(), name="delete-account"),
]

# ---------------- ADMIN (/api/admin/users/) ----------------
admin_router = SimpleRouter()
admin_router.register(r"users", AdminUserViewSet, basename="admin-users")

admin_urlpatterns = admin_router.urls
