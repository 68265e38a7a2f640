import secrets
import string
import typing as t
from dataclasses import dataclass

import structlog
from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone
from django.utils.text import slugify
from ninja.errors import HttpError

from accounts.models import GuestlistUser
from common.models import SiteSettings
from events.models import Contact, Event, Ticket

logger = structlog.get_logger(__name__)

SLUG_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SLUG_SUFFIX_LENGTH = 6


@dataclass(frozen=True)
class EventStats:
    tickets_sold: int
    checked_in: int
    revenue_cents: int
    contacts: int
    invited: int


def generate_slug(title: str) -> str:
    """``"Harvest Dinner"`` -> ``"harvest-dinner-x7k2pq"``."""
    suffix = "".join(secrets.choice(SLUG_SUFFIX_ALPHABET) for _ in range(SLUG_SUFFIX_LENGTH))
    base = slugify(title)[: 80 - SLUG_SUFFIX_LENGTH - 1].strip("-") or "event"
    return f"{base}-{suffix}"


def create_event(actor: GuestlistUser, data: dict[str, t.Any], publish: bool = False) -> Event:
    """Create an event. Drafts stay invisible to the public until published."""
    data = dict(data)
    if not data.get("host_bio"):
        data["host_bio"] = SiteSettings.get_solo().default_host_bio

    event = Event.objects.create(
        **data,
        slug=generate_slug(data["title"]),
        status=Event.Status.PUBLISHED if publish else Event.Status.DRAFT,
        link_active=True,
        created_by=actor,
    )
    logger.info("event_created", event_id=str(event.id), slug=event.slug, status=event.status)
    return event


def update_event(event: Event, data: dict[str, t.Any], publish: bool | None = None) -> Event:
    """Update an event. Archived events keep their status whatever ``publish`` says."""
    for key, value in data.items():
        setattr(event, key, value)
    if publish is not None and event.status != Event.Status.ARCHIVED:
        event.status = Event.Status.PUBLISHED if publish else Event.Status.DRAFT
    event.save()
    logger.info("event_updated", event_id=str(event.id), fields=sorted(data), status=event.status)
    return event


def archive_event(event: Event) -> Event:
    event.status = Event.Status.ARCHIVED
    event.link_active = False
    event.archived_at = timezone.now()
    event.save(update_fields=["status", "link_active", "archived_at", "updated_at"])
    logger.info("event_archived", event_id=str(event.id))
    return event


def unarchive_event(event: Event) -> Event:
    event.status = Event.Status.PUBLISHED
    event.link_active = True
    event.archived_at = None
    event.save(update_fields=["status", "link_active", "archived_at", "updated_at"])
    logger.info("event_unarchived", event_id=str(event.id))
    return event


@transaction.atomic
def delete_event(event: Event) -> None:
    """Permanently delete an archived event.

    Tickets protect their tiers, so they are removed before the event cascade runs.
    """
    if event.status != Event.Status.ARCHIVED:
        raise HttpError(400, "Only archived events can be deleted.")
    event_id = str(event.id)
    Ticket.objects.filter(event=event).delete()
    event.delete()
    logger.info("event_deleted", event_id=event_id)


def list_events(status: Event.Status | None = None) -> t.Any:
    qs = Event.objects.all()
    if status:
        qs = qs.filter(status=status)
    return qs


def get_public_event_by_slug(slug: str) -> Event:
    event = Event.objects.public().prefetch_related("ticket_tiers").filter(slug=slug).first()
    if event is None:
        raise HttpError(404, "Event not found or no longer available.")
    return event


def get_public_ticket(ticket_id: t.Any) -> Ticket:
    """The ticket behind the confirmation page, reachable only while its event is public."""
    ticket = (
        Ticket.objects.with_tier()
        .filter(pk=ticket_id, event__status=Event.Status.PUBLISHED, event__link_active=True)
        .first()
    )
    if ticket is None:
        raise HttpError(404, "Ticket not found.")
    return ticket


def event_stats(event: Event) -> EventStats:
    tickets = Ticket.objects.filter(event=event)
    aggregates = tickets.aggregate(
        sold=Sum("quantity", filter=Q(status__in=[Ticket.Status.CONFIRMED, Ticket.Status.CHECKED_IN])),
        checked_in=Sum("quantity", filter=Q(status=Ticket.Status.CHECKED_IN)),
        revenue=Sum(
            "amount_paid_cents", filter=Q(status__in=[Ticket.Status.CONFIRMED, Ticket.Status.CHECKED_IN])
        ),
    )
    contacts = Contact.objects.filter(event=event)
    return EventStats(
        tickets_sold=aggregates["sold"] or 0,
        checked_in=aggregates["checked_in"] or 0,
        revenue_cents=aggregates["revenue"] or 0,
        contacts=contacts.count(),
        invited=contacts.filter(invited_at__isnull=False).count(),
    )
