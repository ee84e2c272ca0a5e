"""Catalog app models.

Defines the admin-managed, order-independent catalog: add-ons, service
bundles and the La Carte settings singleton. La Carte is the fixed base
service charge applied to every order unless the order overrides it.
"""

import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

LACARTE_SETTINGS_ID = "lacarte"


class ActiveCatalogQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Addon(models.Model):
    """An optional extra the customer can add to an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    price_paise = models.PositiveIntegerField(validators=[MinValueValidator(0)])
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ActiveCatalogQuerySet.as_manager()

    class Meta:
        db_table = "addons"
        ordering = ["display_order", "created_at"]

    def __str__(self):
        return f"{self.name} (#{self.pk})"


class ServiceBundle(models.Model):
    """A packaged set of services; a customer can pick at most one."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    price_paise = models.PositiveIntegerField(validators=[MinValueValidator(0)])
    bullet_points = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveCatalogQuerySet.as_manager()

    class Meta:
        db_table = "service_bundles"
        ordering = ["display_order", "created_at"]

    def __str__(self):
        return f"{self.name} (#{self.pk})"


class LaCarteSettings(models.Model):
    """Singleton row holding the global La Carte price pair and promo note."""

    id = models.CharField(primary_key=True, max_length=20, default=LACARTE_SETTINGS_ID, editable=False)
    real_price_paise = models.PositiveIntegerField()
    current_price_paise = models.PositiveIntegerField()
    discount_note = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "lacarte_settings"
        verbose_name_plural = "La Carte settings"

    def save(self, *args, **kwargs):
        self.id = LACARTE_SETTINGS_ID
        if self._state.adding and type(self).objects.filter(pk=LACARTE_SETTINGS_ID).exists():
            self._state.adding = False
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "LaCarteSettings":
        """Return the stored row, or an unsaved default built from settings."""
        existing = cls.objects.filter(pk=LACARTE_SETTINGS_ID).first()
        if existing is not None:
            return existing
        default = settings.DEFAULT_LACARTE_PAISE
        return cls(real_price_paise=default, current_price_paise=default, discount_note="", is_active=True)

    def __str__(self):
        return f"La Carte {self.current_price_paise}/{self.real_price_paise}"


def get_lacarte_price() -> int:
    """The global La Carte charge in paise."""
    current = LaCarteSettings.load()
    if not current.is_active:
        return settings.DEFAULT_LACARTE_PAISE
    return current.current_price_paise
