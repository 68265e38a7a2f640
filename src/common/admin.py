from django.contrib import admin
from solo.admin import SingletonModelAdmin
from unfold.admin import ModelAdmin

from . import models


@admin.register(models.SiteSettings)
class SiteSettingsAdmin(SingletonModelAdmin, ModelAdmin):  # type: ignore[misc]
    fields = ["venue_name", "default_host_bio", "frontend_base_url", "live_emails", "internal_catchall_email"]
