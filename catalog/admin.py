from django.contrib import admin
from django.utils.html import format_html

from common.utils import format_currency
from .models import Addon, LaCarteSettings, ServiceBundle


class ActiveBadgeMixin:
    def active_badge(self, obj):
        color = "#22c55e" if obj.is_active else "#9ca3af"
        label = "active" if obj.is_active else "inactive"
        return format_html(
            '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
            'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
            color,
            label,
        )
    active_badge.short_description = "status"
    active_badge.admin_order_field = "is_active"

    def price_display(self, obj):
        return format_currency(obj.price_paise)
    price_display.short_description = "price"
    price_display.admin_order_field = "price_paise"


@admin.register(Addon)
class AddonAdmin(ActiveBadgeMixin, admin.ModelAdmin):
    list_display = ("name", "price_display", "active_badge", "display_order", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "description")
    ordering = ("display_order", "created_at")
    list_editable = ("display_order",)


@admin.register(ServiceBundle)
class ServiceBundleAdmin(ActiveBadgeMixin, admin.ModelAdmin):
    """
    Bundles with their bullet points:
    - list: name, price, status, order, feature count
    - filter: active flag
    """
    list_display = ("name", "price_display", "active_badge", "display_order", "feature_count", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "description")
    ordering = ("display_order", "created_at")
    readonly_fields = ("created_at", "updated_at")

    def feature_count(self, obj):
        return len(obj.bullet_points or [])
    feature_count.short_description = "features"


@admin.register(LaCarteSettings)
class LaCarteSettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "current_price_paise", "real_price_paise", "discount_note", "is_active", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        return not LaCarteSettings.objects.exists()
