# permissions/roles.py

"""
PATH: permissions/roles.py

ROLE-BASED ACCESS CONTROL

Two roles only:
- USER  : shoppers (cart, checkout, own orders/payments/ratings/notifications)
- ADMIN : store operators (catalog CRUD, order status, payment review, users)

Path groups map onto these classes:
- /api/admin/*  -> IsAdmin
- /api/user/*   -> IsUserOrAdmin
- public catalog -> AllowAny (DRF builtin)
"""

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"

ROLE_CHOICES = [
    (ROLE_USER, "User"),
    (ROLE_ADMIN, "Admin"),
]

ALL_ROLES = {ROLE_ADMIN, ROLE_USER}


def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def is_admin(user) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return get_user_role(user) == ROLE_ADMIN


# =========================================================
# Base Role Permission
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Subclasses define `allowed_roles`. Anonymous users and users without a
    role are always denied.
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsUserOrAdmin(BaseRolePermission):
    allowed_roles = ALL_ROLES


class IsOwnerOrAdmin(BasePermission):
    """
    Object-level check for rows carrying a `user` FK.
    """

    owner_field = "user"

    def has_object_permission(self, request, view, obj):
        if is_admin(request.user):
            return True
        owner_id = getattr(obj, f"{self.owner_field}_id", None)
        return owner_id is not None and owner_id == getattr(request.user, "id", None)
