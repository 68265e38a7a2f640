import typing as t
import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models

from common.models import TimeStampedModel


class GuestlistUserManager(UserManager["GuestlistUser"]):
    def team(self) -> models.QuerySet["GuestlistUser"]:
        """Users that belong to the organizing team."""
        return self.get_queryset().filter(team_member__isnull=False)


class GuestlistUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    objects = GuestlistUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def team_role(self) -> str | None:
        """The role of the user in the organizing team, if any."""
        member = getattr(self, "team_member", None)
        return member.role if member else None


class TeamMember(TimeStampedModel):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        HELPER = "helper", "Helper"

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="team_member")
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.HELPER, db_index=True)
    name = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name or self.email or self.user_id} ({self.role})"

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Default name and email from the linked user."""
        if not self.email and self.user_id:
            self.email = self.user.email
        if not self.name and self.user_id:
            self.name = self.user.get_full_name() or self.user.get_username()
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN
