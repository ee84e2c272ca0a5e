"""Admin auth API views.

Implements username/password login returning a signed bearer token (also set
as the ``adminAuth`` cookie for the dashboard) and a token check endpoint.
"""

import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response
from rest_framework.views import APIView

from admin_auth.authentication import extract_token
from admin_auth.tokens import TokenPayload, generate_token, verify_token
from .permissions import AllowedAnyLogin
from .serializers import LoginSerializer

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class AdminLoginView(APIView):
    """POST /api/admin/auth/ -> validate credentials and return a bearer token."""

    authentication_classes = []
    permission_classes = [AllowedAnyLogin]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Username and password are required", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        credential = serializer.authenticate()
        if credential is None:
            logger.info("Failed admin login for %r", serializer.validated_data["username"])
            return Response({"error": INVALID_CREDENTIALS}, status=status.HTTP_401_UNAUTHORIZED)

        credential.last_login_at = timezone.now()
        credential.save(update_fields=["last_login_at"])

        token = generate_token(TokenPayload(user_id=str(credential.id), username=credential.username))
        response = Response(
            {"success": True, "message": "Authentication successful", "token": token},
            status=status.HTTP_200_OK,
        )
        response.set_cookie(
            settings.ADMIN_AUTH_COOKIE,
            token,
            max_age=settings.JWT_TTL_SECONDS,
            httponly=False,
            samesite="Lax",
            secure=not settings.DEBUG,
        )
        return response


class VerifyTokenView(APIView):
    """POST /api/admin/verify-token/ -> 200 with the token's user, 401 otherwise."""

    authentication_classes = []
    permission_classes = [AllowedAnyLogin]

    def post(self, request, *args, **kwargs):
        try:
            token = extract_token(request)
        except AuthenticationFailed:
            token = None
        if not token:
            return Response({"error": "No token provided"}, status=status.HTTP_401_UNAUTHORIZED)
        payload = verify_token(token)
        if payload is None:
            return Response({"error": "Invalid or expired token"}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(
            {"success": True, "user": {"userId": payload.user_id, "username": payload.username}},
            status=status.HTTP_200_OK,
        )
