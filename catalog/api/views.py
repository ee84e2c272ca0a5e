"""Catalog API views.

Public read-only lists of active add-ons and bundles plus the current La
Carte settings, and admin CRUD for all three.
"""

import logging

from django.db.models import ProtectedError
from rest_framework import generics, status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.models import LACARTE_SETTINGS_ID, Addon, LaCarteSettings, ServiceBundle
from .permissions import IsReadOnly
from .serializers import AddonSerializer, LaCarteSettingsSerializer, ServiceBundleSerializer

logger = logging.getLogger(__name__)


class CatalogEntryInUse(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This entry is part of confirmed orders. Deactivate it instead of deleting."
    default_code = "in_use"


def _destroy_unless_confirmed(instance, kind):
    """Delete a catalog entry; entries referenced by confirmed orders are kept."""
    pk = instance.pk
    try:
        instance.delete()
    except ProtectedError:
        raise CatalogEntryInUse()
    logger.info("Deleted %s %s (%s)", kind, pk, instance.name)


# ------------------------------------ public ------------------------------------

class PublicAddonListAPIView(generics.ListAPIView):
    """GET /api/addons/ -> active add-ons in display order."""

    authentication_classes = []
    permission_classes = [IsReadOnly]
    serializer_class = AddonSerializer

    def get_queryset(self):
        return Addon.objects.active().order_by("display_order", "created_at")


class PublicBundleListAPIView(generics.ListAPIView):
    """GET /api/bundles/ -> active bundles in display order."""

    authentication_classes = []
    permission_classes = [IsReadOnly]
    serializer_class = ServiceBundleSerializer

    def get_queryset(self):
        return ServiceBundle.objects.active().order_by("display_order", "created_at")


class PublicLaCarteAPIView(APIView):
    """GET /api/lacarte/ -> current La Carte settings (defaults if never saved)."""

    authentication_classes = []
    permission_classes = [IsReadOnly]

    def get(self, request):
        return Response(LaCarteSettingsSerializer(LaCarteSettings.load()).data, status=status.HTTP_200_OK)


# ------------------------------------ admin -------------------------------------

class AddonListCreateAPIView(generics.ListCreateAPIView):
    """GET: all add-ons (active and inactive). POST: create an add-on."""

    queryset = Addon.objects.all().order_by("display_order", "created_at")
    serializer_class = AddonSerializer


class AddonRetrieveUpdateDestroyAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/PUT/DELETE a single add-on."""

    queryset = Addon.objects.all()
    serializer_class = AddonSerializer

    def perform_destroy(self, instance):
        _destroy_unless_confirmed(instance, "addon")


class BundleListCreateAPIView(generics.ListCreateAPIView):
    """GET: all bundles (active and inactive). POST: create a bundle."""

    queryset = ServiceBundle.objects.all().order_by("display_order", "created_at")
    serializer_class = ServiceBundleSerializer


class BundleRetrieveUpdateDestroyAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/PUT/DELETE a single bundle."""

    queryset = ServiceBundle.objects.all()
    serializer_class = ServiceBundleSerializer

    def perform_destroy(self, instance):
        _destroy_unless_confirmed(instance, "bundle")


class LaCarteSettingsAPIView(APIView):
    """GET/PUT /api/admin/lacarte/ -> read or replace the La Carte singleton."""

    def get(self, request):
        return Response(LaCarteSettingsSerializer(LaCarteSettings.load()).data, status=status.HTTP_200_OK)

    def put(self, request):
        instance = LaCarteSettings.objects.filter(pk=LACARTE_SETTINGS_ID).first()
        serializer = LaCarteSettingsSerializer(instance, data=request.data)
        serializer.is_valid(raise_exception=True)
        saved = serializer.save()
        logger.info(
            "La Carte settings updated: current=%s real=%s",
            saved.current_price_paise,
            saved.real_price_paise,
        )
        return Response(LaCarteSettingsSerializer(saved).data, status=status.HTTP_200_OK)
