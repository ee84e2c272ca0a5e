from django.contrib import admin
from django.utils.html import format_html

from common.utils import format_currency
from .models import ConfirmedOrderAddon, ConfirmedOrderBundle, ConfirmedOrderService, RequestItem, ServiceRequest

STATUS_COLORS = {
    ServiceRequest.Status.PENDING: "#f59e0b",
    ServiceRequest.Status.SENT: "#3b82f6",
    ServiceRequest.Status.VIEWED: "#8b5cf6",
    ServiceRequest.Status.CONFIRMED: "#22c55e",
    ServiceRequest.Status.CANCELLED: "#ef4444",
}


class RequestItemInline(admin.TabularInline):
    model = RequestItem
    extra = 0
    fields = ("section", "label", "price_paise", "is_suggested", "is_selected", "position")


class ConfirmedAddonInline(admin.TabularInline):
    model = ConfirmedOrderAddon
    extra = 0
    readonly_fields = ("addon", "price_paise", "created_at")
    can_delete = False


class ConfirmedBundleInline(admin.TabularInline):
    model = ConfirmedOrderBundle
    extra = 0
    readonly_fields = ("bundle", "price_paise", "selected_at")
    can_delete = False


class ConfirmedServiceInline(admin.TabularInline):
    model = ConfirmedOrderService
    extra = 0
    readonly_fields = ("service_item", "created_at")
    can_delete = False


@admin.register(ServiceRequest)
class ServiceRequestAdmin(admin.ModelAdmin):
    """
    Request desk overview:
    - list: order id, customer, bike, status badge, total, created
    - filter: status, created (date hierarchy)
    - search: order id, customer, bike, phone, slug
    - readonly: money aggregates and delivery metadata
    """
    list_display = ("order_id", "customer_name", "bike_name", "status_badge", "total_display", "created_at")
    list_filter = ("status", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    search_fields = ("order_id", "customer_name", "bike_name", "phone_digits_intl", "short_slug")
    inlines = [RequestItemInline, ConfirmedServiceInline, ConfirmedAddonInline, ConfirmedBundleInline]

    # totals are written by recalculate_totals only
    readonly_fields = (
        "short_slug",
        "subtotal_paise",
        "tax_paise",
        "total_paise",
        "created_at",
        "sent_at",
        "viewed_at",
        "confirmed_at",
        "whatsapp_message_id",
        "whatsapp_sent_at",
        "whatsapp_error",
    )

    def status_badge(self, obj):
        return format_html(
            '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
            'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
            STATUS_COLORS.get(obj.status, "#6b7280"),
            obj.get_status_display(),
        )
    status_badge.short_description = "status"
    status_badge.admin_order_field = "status"

    def total_display(self, obj):
        return format_currency(obj.total_paise)
    total_display.short_description = "total"
    total_display.admin_order_field = "total_paise"
