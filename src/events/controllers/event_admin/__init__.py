"""Organizer endpoints, split by area."""

from .attendees import EventAdminAttendeesController
from .contacts import EventAdminContactsController
from .core import EventAdminCoreController
from .messaging import EventAdminMessagingController
from .tiers import EventAdminTiersController

EVENT_ADMIN_CONTROLLERS: list[type] = [
    EventAdminCoreController,
    EventAdminTiersController,
    EventAdminAttendeesController,
    EventAdminContactsController,
    EventAdminMessagingController,
]

__all__ = [
    "EVENT_ADMIN_CONTROLLERS",
    "EventAdminAttendeesController",
    "EventAdminContactsController",
    "EventAdminCoreController",
    "EventAdminMessagingController",
    "EventAdminTiersController",
]
