import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Lower

from common.models import TimeStampedModel


class ContactQuerySet(models.QuerySet["Contact"]):
    def with_email(self, email: str) -> t.Self:
        return self.filter(email__iexact=email.strip())

    def with_phone(self, phone: str) -> t.Self:
        return self.filter(phone=phone.strip())

    def uninvited(self) -> t.Self:
        return self.filter(invited_at__isnull=True)


class Contact(TimeStampedModel):
    class Channel(models.TextChoices):
        EMAIL = "email", "Email"
        SMS = "sms", "SMS"
        BOTH = "both", "Email and SMS"
        NONE = "none", "None"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="contacts")
    first_name = models.CharField(max_length=255, blank=True, default="")
    last_name = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    invitation_channel = models.CharField(max_length=10, choices=Channel.choices, default=Channel.NONE)
    invited_at = models.DateTimeField(null=True, blank=True)
    csv_source = models.CharField(max_length=255, blank=True, default="")
    imported_at = models.DateTimeField(null=True, blank=True)

    objects = ContactQuerySet.as_manager()

    class Meta:
        ordering = ["last_name", "first_name"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                "event",
                condition=~models.Q(email=""),
                name="unique_contact_email_per_event",
            ),
            models.UniqueConstraint(
                fields=["event", "phone"],
                condition=~models.Q(phone=""),
                name="unique_contact_phone_per_event",
            ),
        ]

    def __str__(self) -> str:
        return self.full_name or self.email or self.phone

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        self.email = self.email.strip()
        self.phone = self.phone.strip()
        super().save(*args, **kwargs)

    def clean(self) -> None:
        super().clean()
        if not (self.email or self.phone):
            raise ValidationError("At least one of email or phone is required")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def wants_email(self) -> bool:
        return self.invitation_channel in (self.Channel.EMAIL, self.Channel.BOTH) and bool(self.email)

    @property
    def wants_sms(self) -> bool:
        return self.invitation_channel in (self.Channel.SMS, self.Channel.BOTH) and bool(self.phone)


class CsvImport(TimeStampedModel):
    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="csv_imports")
    filename = models.CharField(max_length=255)
    row_count = models.PositiveIntegerField(default=0)
    imported_count = models.PositiveIntegerField(default=0)
    skipped_count = models.PositiveIntegerField(default=0)
    imported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="csv_imports"
    )

    class Meta:
        ordering = ["-created_at"]
