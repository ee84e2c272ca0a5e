"""Admin auth models.

Defines the AdminCredential model: the username/bcrypt-hash pair used to sign
in to the service desk. Admins are not Django users; a successful login is
answered with a signed, time-limited bearer token.
"""

import uuid

from django.db import models

from admin_auth.passwords import hash_password, verify_password


class AdminCredential(models.Model):
    """A single admin login."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=128)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "admin_credentials"
        ordering = ["username"]

    def set_password(self, raw_password: str) -> None:
        self.password = hash_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return verify_password(raw_password, self.password)

    def __str__(self) -> str:
        return f"AdminCredential<{self.username}>"
