from django.urls import path
from .views import SendWhatsAppAPIView

urlpatterns = [
    path("webhooks/send-whatsapp/", SendWhatsAppAPIView.as_view(), name="send-whatsapp"),
]
