import typing as t
from uuid import UUID

from ninja_extra import ControllerBase

from accounts.models import GuestlistUser
from events import models


class TeamController(ControllerBase):
    """Base controller for organizer endpoints. Subclasses register routes with ``@api_controller``."""

    def user(self) -> GuestlistUser:
        """Get the user for this request."""
        return t.cast(GuestlistUser, self.context.request.user)  # type: ignore[union-attr]

    def get_event(self, event_id: UUID) -> models.Event:
        return t.cast(models.Event, self.get_object_or_exception(models.Event, pk=event_id))
