"""Service requests app models.

A ServiceRequest is the order an admin prepares for a customer: a header
(customer, bike, phone, La Carte override) plus repair/replacement line
items. Once the customer confirms, the chosen items, add-ons and bundle are
frozen in the confirmed-selection tables together with price snapshots.
"""

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum

from catalog.models import Addon, ServiceBundle, get_lacarte_price
from common.utils import (
    generate_short_slug,
    generate_whatsapp_message,
    generate_whatsapp_url,
    order_public_url,
)


class ServiceRequest(models.Model):
    """A customer order and its lifecycle."""

    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        SENT = "sent", "sent"
        VIEWED = "viewed", "viewed"
        CONFIRMED = "confirmed", "confirmed"
        CANCELLED = "cancelled", "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_id = models.CharField(max_length=100)
    short_slug = models.CharField(max_length=16, unique=True, editable=False)
    bike_name = models.CharField(max_length=200)
    customer_name = models.CharField(max_length=200)
    phone_digits_intl = models.CharField(max_length=15)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SENT)

    subtotal_paise = models.PositiveIntegerField(default=0)
    tax_paise = models.PositiveIntegerField(default=0)
    total_paise = models.PositiveIntegerField(default=0)
    lacarte_paise = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(0)])

    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    viewed_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    whatsapp_message_id = models.CharField(max_length=255, null=True, blank=True)
    whatsapp_sent_at = models.DateTimeField(null=True, blank=True)
    whatsapp_error = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "requests"
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.short_slug:
            self.short_slug = self._unique_slug()
        super().save(*args, **kwargs)

    @classmethod
    def _unique_slug(cls) -> str:
        while True:
            slug = generate_short_slug()
            if not cls.objects.filter(short_slug=slug).exists():
                return slug

    @property
    def is_locked(self) -> bool:
        """Confirmed and cancelled orders no longer change."""
        return self.status in (self.Status.CONFIRMED, self.Status.CANCELLED)

    @property
    def public_url(self) -> str:
        """Customer link to the order, built on PUBLIC_BASE_URL."""
        return order_public_url(settings.PUBLIC_BASE_URL, self.short_slug)

    def whatsapp_share_url(self) -> str:
        """wa.me link with the order message, for sending by hand."""
        message = generate_whatsapp_message(self.customer_name, self.bike_name, self.order_id, self.public_url)
        return generate_whatsapp_url(self.phone_digits_intl, message)

    def effective_lacarte_paise(self) -> int:
        if self.lacarte_paise is not None:
            return self.lacarte_paise
        return get_lacarte_price()

    def recalculate_totals(self, save=True):
        """Write subtotal and total from the current rows.

        Before confirmation the subtotal covers every line item; afterwards
        only the confirmed ones, plus the confirmed add-on and bundle
        snapshots. The La Carte charge is always part of the total.
        """
        if self.status == self.Status.CONFIRMED:
            subtotal = self.confirmed_services.aggregate(s=Sum("service_item__price_paise"))["s"] or 0
            extras = (self.confirmed_addons.aggregate(s=Sum("price_paise"))["s"] or 0) + (
                self.confirmed_bundles.aggregate(s=Sum("price_paise"))["s"] or 0
            )
        else:
            subtotal = self.items.aggregate(s=Sum("price_paise"))["s"] or 0
            extras = 0
        self.subtotal_paise = subtotal
        self.total_paise = subtotal + extras + self.effective_lacarte_paise()
        if save:
            self.save(update_fields=["subtotal_paise", "total_paise"])
        return self

    def __str__(self) -> str:
        return f"ServiceRequest<{self.order_id} {self.status}>"


class RequestItem(models.Model):
    """A repair or replacement line on a request."""

    class Section(models.TextChoices):
        REPAIR = "repair", "repair"
        REPLACEMENT = "replacement", "replacement"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    request = models.ForeignKey(ServiceRequest, on_delete=models.CASCADE, related_name="items")
    section = models.CharField(max_length=20, choices=Section.choices)
    label = models.CharField(max_length=500)
    price_paise = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    is_suggested = models.BooleanField(default=True)
    is_selected = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "request_items"
        ordering = ["position", "created_at"]

    def __str__(self) -> str:
        return f"{self.section}: {self.label}"


class ConfirmedOrderService(models.Model):
    request = models.ForeignKey(ServiceRequest, on_delete=models.CASCADE, related_name="confirmed_services")
    service_item = models.ForeignKey(RequestItem, on_delete=models.CASCADE, related_name="confirmations")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "confirmed_order_services"
        constraints = [
            models.UniqueConstraint(fields=["request", "service_item"], name="uniq_confirmed_service"),
        ]


class ConfirmedOrderAddon(models.Model):
    request = models.ForeignKey(ServiceRequest, on_delete=models.CASCADE, related_name="confirmed_addons")
    addon = models.ForeignKey(Addon, on_delete=models.PROTECT, related_name="confirmations")
    price_paise = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "confirmed_order_addons"
        constraints = [
            models.UniqueConstraint(fields=["request", "addon"], name="uniq_confirmed_addon"),
        ]


class ConfirmedOrderBundle(models.Model):
    request = models.ForeignKey(ServiceRequest, on_delete=models.CASCADE, related_name="confirmed_bundles")
    bundle = models.ForeignKey(ServiceBundle, on_delete=models.PROTECT, related_name="confirmations")
    price_paise = models.PositiveIntegerField()
    selected_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "confirmed_order_bundles"
        constraints = [
            models.UniqueConstraint(fields=["request", "bundle"], name="uniq_confirmed_bundle"),
        ]
