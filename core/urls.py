from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("admin_auth.api.urls")),
    path("api/", include("catalog.api.urls")),
    path("api/", include("service_requests.api.urls")),
    path("api/", include("public_orders.api.urls")),
    path("api/", include("notifications.api.urls")),
    path("api/", include("analytics.api.urls")),
]
