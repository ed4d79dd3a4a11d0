"""
Authz permissions.

The persisted ``User.role`` column is the only source of truth for
administrative rights.
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices


def is_admin(user) -> bool:
    """True for authenticated users whose stored role is ADMIN."""
    if not user or not user.is_authenticated:
        return False
    return getattr(user, 'role', None) == RoleChoices.ADMIN


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    Permission for Request and WorkDay endpoints.

    - Any authenticated user (inspectors included): read
    - Admin: create / delete
    """
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        if request.method in permissions.SAFE_METHODS:
            return True

        return is_admin(request.user)

    def has_object_permission(self, request, view, obj):
        return self.has_permission(request, view)
