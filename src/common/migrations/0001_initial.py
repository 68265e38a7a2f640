from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="SiteSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("venue_name", models.CharField(default="The Barn", max_length=255)),
                (
                    "default_host_bio",
                    models.TextField(blank=True, default="", help_text="Pre-filled host bio for new events."),
                ),
                ("frontend_base_url", models.URLField(default=settings.FRONTEND_BASE_URL)),
                ("live_emails", models.BooleanField(default=False, help_text="Live-emails enabled")),
                (
                    "internal_catchall_email",
                    models.EmailField(
                        default=settings.INTERNAL_CATCHALL_EMAIL,
                        help_text="Non-live emails are redirected to this address.",
                        max_length=254,
                        verbose_name="Internal Catchall Email",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Site Settings",
                "verbose_name_plural": "Site Settings",
            },
        ),
    ]
