from django.urls import path
from .views import (
    ConfirmedSelectionAPIView,
    RequestBillAPIView,
    RequestDetailAPIView,
    RequestExportAPIView,
    RequestListCreateAPIView,
    SendWhatsAppAPIView,
    WhatsAppStatusAPIView,
)

urlpatterns = [
    path("requests/", RequestListCreateAPIView.as_view(), name="request-list-create"),
    path("requests/export/", RequestExportAPIView.as_view(), name="request-export"),
    path("requests/<uuid:pk>/", RequestDetailAPIView.as_view(), name="request-detail"),
    path("requests/<uuid:pk>/confirmed/", ConfirmedSelectionAPIView.as_view(), name="request-confirmed"),
    path(
        "requests/<uuid:pk>/update-whatsapp-status/",
        WhatsAppStatusAPIView.as_view(),
        name="request-whatsapp-status",
    ),
    path("requests/<uuid:pk>/send-whatsapp/", SendWhatsAppAPIView.as_view(), name="request-send-whatsapp"),
    path("requests/<uuid:pk>/bill/", RequestBillAPIView.as_view(), name="request-bill"),
]
