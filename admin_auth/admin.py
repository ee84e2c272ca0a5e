from django.contrib import admin

from .models import AdminCredential


@admin.register(AdminCredential)
class AdminCredentialAdmin(admin.ModelAdmin):
    """
    Admin logins of the service desk.
    The password hash is never editable here; use ``manage.py create_admin``.
    """
    list_display = ("username", "is_active", "created_at", "last_login_at")
    list_filter = ("is_active",)
    search_fields = ("username",)
    ordering = ("username",)
    readonly_fields = ("password", "created_at", "last_login_at")
    fields = ("username", "is_active", "password", "created_at", "last_login_at")
