"""Admin auth API serializers."""

from rest_framework import serializers

from admin_auth.models import AdminCredential


class LoginSerializer(serializers.Serializer):
    """Authenticate username/password against active admin credentials."""

    username = serializers.CharField(
        error_messages={"required": "Username and password are required", "blank": "Username and password are required"}
    )
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        error_messages={"required": "Username and password are required", "blank": "Username and password are required"},
    )

    def authenticate(self):
        """Return the matching active credential or None."""
        data = self.validated_data
        try:
            credential = AdminCredential.objects.get(username=data["username"], is_active=True)
        except AdminCredential.DoesNotExist:
            return None
        if not credential.check_password(data["password"]):
            return None
        return credential
