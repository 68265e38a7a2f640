import typing as t
import uuid

from django.conf import settings
from django.db import models
from solo.models import SingletonModel


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Override the save method to call full_clean before saving."""
        self.full_clean()
        super().save(*args, **kwargs)


class SiteSettings(SingletonModel):
    """Singleton model for venue-wide application settings."""

    venue_name = models.CharField(max_length=255, default="The Barn")
    default_host_bio = models.TextField(blank=True, default="", help_text="Pre-filled host bio for new events.")
    frontend_base_url = models.URLField(default=settings.FRONTEND_BASE_URL)
    live_emails = models.BooleanField(default=False, help_text="Live-emails enabled")
    internal_catchall_email = models.EmailField(
        verbose_name="Internal Catchall Email",
        help_text="Non-live emails are redirected to this address.",
        default=settings.INTERNAL_CATCHALL_EMAIL,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover
        return "Site Settings"

    class Meta:
        verbose_name = "Site Settings"
        verbose_name_plural = "Site Settings"
