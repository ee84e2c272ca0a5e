"""DRF authentication for admin bearer tokens.

The token is read from the ``Authorization: Bearer`` header first and from the
``adminAuth`` cookie second. The cookie is honoured for reads only.
"""

from dataclasses import dataclass

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.permissions import SAFE_METHODS

from admin_auth.tokens import verify_token

BEARER = "Bearer"


@dataclass(frozen=True)
class AdminPrincipal:
    """The authenticated admin attached to ``request.user``."""

    user_id: str
    username: str

    is_authenticated = True
    is_admin = True


def extract_token(request, allow_cookie=True):
    """Return the raw token from header or cookie, or None."""
    header = get_authorization_header(request).split()
    if header and header[0].lower() == BEARER.lower().encode():
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid token header.")
        return header[1].decode("utf-8")
    if not allow_cookie:
        return None
    return request.COOKIES.get(settings.ADMIN_AUTH_COOKIE) or None


class AdminTokenAuthentication(BaseAuthentication):
    """Bearer header on every method; the cookie only on safe methods.

    Views are CSRF-exempt, so a write must carry the header explicitly.
    """

    def authenticate(self, request):
        token = extract_token(request, allow_cookie=request.method in SAFE_METHODS)
        if not token:
            return None
        payload = verify_token(token)
        if payload is None:
            raise exceptions.AuthenticationFailed("Unauthorized - Invalid or expired token")
        return AdminPrincipal(payload.user_id, payload.username), token

    def authenticate_header(self, request):
        return BEARER
