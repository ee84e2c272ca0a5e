from django.urls import path
from .views import (
    AddonListCreateAPIView,
    AddonRetrieveUpdateDestroyAPIView,
    BundleListCreateAPIView,
    BundleRetrieveUpdateDestroyAPIView,
    LaCarteSettingsAPIView,
    PublicAddonListAPIView,
    PublicBundleListAPIView,
    PublicLaCarteAPIView,
)

urlpatterns = [
    path("addons/", PublicAddonListAPIView.as_view(), name="addon-public-list"),
    path("bundles/", PublicBundleListAPIView.as_view(), name="bundle-public-list"),
    path("lacarte/", PublicLaCarteAPIView.as_view(), name="lacarte-public"),
    path("admin/addons/", AddonListCreateAPIView.as_view(), name="addon-list-create"),
    path("admin/addons/<uuid:pk>/", AddonRetrieveUpdateDestroyAPIView.as_view(), name="addon-detail"),
    path("admin/bundles/", BundleListCreateAPIView.as_view(), name="bundle-list-create"),
    path("admin/bundles/<uuid:pk>/", BundleRetrieveUpdateDestroyAPIView.as_view(), name="bundle-detail"),
    path("admin/lacarte/", LaCarteSettingsAPIView.as_view(), name="lacarte-settings"),
]
