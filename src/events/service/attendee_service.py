import csv
import io
import re
import typing as t
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from ninja.errors import HttpError

from accounts.models import GuestlistUser
from events.models import Event, Ticket, TicketTier

from .reservation import Flow, claim_seats

logger = structlog.get_logger(__name__)

EXPORT_HEADERS = ["Name", "Email", "Phone", "Tier", "Quantity", "Amount Paid", "Status", "Checked In At"]


def list_attendees(event: Event, status: str | None = None, search: str | None = None) -> t.Any:
    qs = Ticket.objects.with_tier().filter(event=event)
    if status:
        qs = qs.filter(status=status)
    if search:
        qs = qs.filter(
            Q(attendee_name__icontains=search)
            | Q(attendee_email__icontains=search)
            | Q(ticket_code__icontains=search)
        )
    return qs.order_by("attendee_name")


def create_walk_in(
    event: Event,
    tier_id: UUID,
    *,
    attendee_name: str,
    attendee_email: str = "",
    attendee_phone: str = "",
    quantity: int = 1,
    issued_by: GuestlistUser | None = None,
) -> Ticket:
    """Issue a ticket at the door.

    Staff may hand out seats on any tier regardless of its price or the guest's cap, but never
    past the tier's total.
    """
    if not TicketTier.objects.filter(pk=tier_id, event=event).exists():
        raise HttpError(404, "Tier not found for this event.")

    with transaction.atomic():
        tier = claim_seats(tier_id, quantity, flow=Flow.WALK_IN)
        ticket = Ticket.objects.create(
            event=event,
            tier=tier,
            attendee_name=attendee_name,
            attendee_email=attendee_email,
            attendee_phone=attendee_phone,
            quantity=quantity,
            status=Ticket.Status.CONFIRMED,
            inventory_counted=True,
            amount_paid_cents=0,
            created_by=issued_by,
        )

    logger.info(
        "walk_in_created",
        event_id=str(event.id),
        tier_id=str(tier.id),
        ticket_id=str(ticket.id),
        quantity=quantity,
    )
    return ticket


@transaction.atomic
def toggle_check_in(ticket: Ticket) -> Ticket:
    """Flip a ticket between confirmed and checked in."""
    ticket = Ticket.objects.select_for_update().get(pk=ticket.pk)
    if ticket.status == Ticket.Status.CONFIRMED:
        ticket.status = Ticket.Status.CHECKED_IN
        ticket.checked_in_at = timezone.now()
    elif ticket.status == Ticket.Status.CHECKED_IN:
        ticket.status = Ticket.Status.CONFIRMED
        ticket.checked_in_at = None
    else:
        raise HttpError(400, "Ticket cannot be toggled in its current status.")
    ticket.save(update_fields=["status", "checked_in_at", "updated_at"])
    logger.info("ticket_check_in_toggled", ticket_id=str(ticket.id), status=ticket.status)
    return ticket


def lookup_ticket(event: Event, code: str) -> Ticket:
    ticket = Ticket.objects.with_tier().filter(event=event, ticket_code__iexact=code.strip()).first()
    if ticket is None:
        raise HttpError(404, "Ticket not found.")
    return ticket


def export_attendees_csv(event: Event) -> str:
    """Render every ticket of ``event`` as CSV, one row per ticket.

    Amounts are in currency units with two decimals. Check-in times are ISO 8601, blank when the
    guest never checked in.
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_HEADERS)
    tickets = Ticket.objects.with_tier().filter(event=event).order_by("attendee_name", "created_at")
    for ticket in tickets:
        writer.writerow(
            [
                ticket.attendee_name,
                ticket.attendee_email,
                ticket.attendee_phone,
                ticket.tier.name,
                ticket.quantity,
                f"{ticket.amount_paid_cents / 100:.2f}",
                ticket.status,
                ticket.checked_in_at.isoformat() if ticket.checked_in_at else "",
            ]
        )
    logger.info("attendees_exported", event_id=str(event.id), rows=len(tickets))
    return output.getvalue()


def export_filename(event: Event) -> str:
    return f"{re.sub(r'[^a-zA-Z0-9_ -]', '', event.title)}-attendees.csv"
