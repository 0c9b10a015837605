"""
URL configuration for the backend.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path

from apps.grupos.webhooks import provisioning_callback

from .api import api

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/", api.urls),
    # Inbound callbacks - outside Django Ninja for raw request handling
    path("webhooks/provisioning/", provisioning_callback, name="provisioning-callback"),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
