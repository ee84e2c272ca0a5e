from django.urls import path
from .views import AdminLoginView, VerifyTokenView

urlpatterns = [
    path("admin/auth/", AdminLoginView.as_view(), name="admin-login"),
    path("admin/verify-token/", VerifyTokenView.as_view(), name="admin-verify-token"),
]
