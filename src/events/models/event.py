import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def public(self) -> t.Self:
        """Events reachable through their public link."""
        return self.filter(status=Event.Status.PUBLISHED, link_active=True)


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        return EventQuerySet(self.model, using=self._db)

    def public(self) -> EventQuerySet:
        return self.get_queryset().public()


class Event(TimeStampedModel):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    class EventType(models.TextChoices):
        DINNER = "dinner", "Dinner"
        CONCERT = "concert", "Concert"
        MOVIE_NIGHT = "movie_night", "Movie Night"
        OTHER = "other", "Other"

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=80, unique=True)
    event_type = models.CharField(max_length=20, choices=EventType.choices, default=EventType.OTHER, db_index=True)
    description = models.TextField(blank=True, default="")
    date_start = models.DateTimeField(db_index=True)
    date_end = models.DateTimeField()
    location_name = models.CharField(max_length=255, blank=True, default="")
    location_address = models.CharField(max_length=500, blank=True, default="")
    capacity = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    cover_image_url = models.URLField(max_length=1000, blank=True, default="")
    host_bio = models.TextField(blank=True, default="")
    faq = models.JSONField(default=list, blank=True, help_text="List of {question, answer} objects.")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)
    link_active = models.BooleanField(default=True, help_text="Whether the public event link accepts visitors.")
    archived_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="created_events"
    )

    objects = EventManager()

    class Meta:
        ordering = ["-date_start"]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        """Validate the scheduling window."""
        super().clean()
        if self.date_start and self.date_end and self.date_end <= self.date_start:
            raise ValidationError({"date_end": "End date must be after start date"})

    @property
    def is_public(self) -> bool:
        return self.status == self.Status.PUBLISHED and self.link_active

    @property
    def has_ended(self) -> bool:
        return self.date_end <= timezone.now()
