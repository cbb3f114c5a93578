"""Bearer token authentication for admin endpoints.

Tokens are issued by the login view and stored with
rest_framework.authtoken; clients send them as ``Authorization: Bearer <key>``.
"""

from rest_framework.authentication import TokenAuthentication
from rest_framework.permissions import SAFE_METHODS, BasePermission


class BearerTokenAuthentication(TokenAuthentication):
    keyword = "Bearer"


class IsAdmin(BasePermission):
    """Authenticated staff users only."""

    message = "Administrator access required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)


class IsAdminOrReadOnly(IsAdmin):
    """Anyone may read; writes need a staff user."""

    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)


def is_admin(request) -> bool:
    user = getattr(request, "user", None)
    return bool(user and user.is_authenticated and user.is_staff)
