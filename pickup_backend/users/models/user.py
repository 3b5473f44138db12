"""
PATH: users/models/user.py

CUSTOM USER MODEL

- Email is the login identity (USERNAME_FIELD).
- Two roles: USER (shopper) and ADMIN (store operator).
- ADMIN users are also Django staff so they can reach the Django admin.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import RegexValidator
from django.db import models

from core.images import validate_image_extension
from permissions.roles import ROLE_ADMIN, ROLE_CHOICES, ROLE_USER

phone_validator = RegexValidator(
    regex=r"^\+?[0-9 ()-]{7,20}$",
    message="Enter a valid phone number.",
)


def profile_picture_path(instance, filename):
    return f"profiles/{instance.id}/{filename}"


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email=None, password=None, **extra_fields):
        if not email:
            raise ValueError("An email address is required")

        email = self.normalize_email(email).strip()
        extra_fields.setdefault("role", ROLE_USER)
        extra_fields.setdefault("is_active", True)
        if extra_fields["role"] == ROLE_ADMIN:
            extra_fields.setdefault("is_staff", True)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_USER = ROLE_USER
    ROLE_ADMIN = ROLE_ADMIN

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)

    full_name = models.CharField(max_length=150, blank=True)
    phone_number = models.CharField(
        max_length=20, blank=True, validators=[phone_validator]
    )
    profile_picture = models.FileField(
        upload_to=profile_picture_path,
        blank=True,
        validators=[validate_image_extension],
    )

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    @property
    def is_admin_role(self) -> bool:
        return self.role == ROLE_ADMIN

    def __str__(self):
        return f"{self.email} ({self.role})"
