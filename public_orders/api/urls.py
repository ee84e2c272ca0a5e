from django.urls import path
from .views import (
    ConfirmOrderAPIView,
    OrderViewAPIView,
    PublicBillAPIView,
    PublicOrderAPIView,
    SelectionAPIView,
)

urlpatterns = [
    path("public/orders/<str:slug>/", PublicOrderAPIView.as_view(), name="public-order"),
    path("public/orders/<str:slug>/view/", OrderViewAPIView.as_view(), name="public-order-view"),
    path("public/orders/<str:slug>/selection/", SelectionAPIView.as_view(), name="public-order-selection"),
    path("public/orders/<str:slug>/confirm/", ConfirmOrderAPIView.as_view(), name="public-order-confirm"),
    path("public/orders/<str:slug>/bill/", PublicBillAPIView.as_view(), name="public-order-bill"),
]
