"""Catalog API permissions.

The customer-facing catalog is readable by anyone; every write goes through
the admin endpoints, which use the project default ``IsAdmin``.
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsReadOnly(BasePermission):
    """Allow only safe methods (GET/HEAD/OPTIONS)."""

    def has_permission(self, request, view):
        return request.method in SAFE_METHODS
