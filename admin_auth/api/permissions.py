"""Admin auth API permissions.

``IsAdmin`` is the project-wide default permission; the login endpoint opts
out with ``AllowedAnyLogin``.
"""

from rest_framework.permissions import AllowAny, BasePermission


class AllowedAnyLogin(AllowAny):
    """Explicit alias for the login endpoint (semantics: allow any)."""
    pass


class IsAdmin(BasePermission):
    """Grant access only to requests carrying a valid admin token."""

    message = "Unauthorized - No token provided"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and getattr(user, "is_authenticated", False) and getattr(user, "is_admin", False))
