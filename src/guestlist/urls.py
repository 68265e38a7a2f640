"""URL configuration for the guestlist project."""

from django.conf import settings
from django.contrib import admin
from django.urls import path

from api.api import api

admin.site.site_header = f"{settings.SITE_NAME} v{settings.VERSION}"
admin.site.index_title = f"Welcome to {settings.SITE_NAME} v{settings.VERSION} Admin"
admin.site.site_title = f"{settings.SITE_NAME} v{settings.VERSION} Admin"

urlpatterns = [
    path("api/", api.urls),
]

if settings.ADMIN_URL:  # pragma: no cover
    urlpatterns.append(path(settings.ADMIN_URL, admin.site.urls))
