"""
URL configuration for core_backend project.

Each app registers its own router; the ``orders`` and ``tables`` apps register
their base endpoints themselves so they are included at ``api/``.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health/", health_check, name="health_check"),
    path("api/", include("tables.urls")),
    path("api/", include("orders.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/", include("discounts.urls")),
]
