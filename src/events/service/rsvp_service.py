from uuid import UUID

import structlog
from django.db import transaction

from events.models import Ticket

from .checkout_service import get_event_tier, get_public_event
from .reservation import Flow, claim_seats

logger = structlog.get_logger(__name__)


def _queue_confirmation(ticket_id: str) -> None:
    from notifications.tasks import send_rsvp_confirmation

    send_rsvp_confirmation.delay(ticket_id)


def create_rsvp(
    *,
    event_id: UUID,
    tier_id: UUID,
    attendee_name: str,
    attendee_email: str = "",
    attendee_phone: str = "",
    quantity: int = 1,
) -> Ticket:
    """Reserve seats on a free tier.

    Seats are claimed and the confirmed ticket inserted in one transaction, so either both happen
    or neither does. The confirmation email is queued only after the commit and cannot undo the
    reservation.

    Raises:
        HttpError: If the event or tier is gone.
        ReservationRejectedError: If the tier is priced, sold out, or the guest's cap is reached.
    """
    event = get_public_event(event_id)
    tier = get_event_tier(event, tier_id)

    with transaction.atomic():
        tier = claim_seats(tier.pk, quantity, flow=Flow.RSVP, email=attendee_email, phone=attendee_phone)
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
        )
        if attendee_email:
            transaction.on_commit(lambda: _queue_confirmation(str(ticket.id)), robust=True)

    logger.info(
        "rsvp_confirmed",
        event_id=str(event.id),
        tier_id=str(tier.id),
        ticket_id=str(ticket.id),
        quantity=quantity,
        quantity_sold=tier.quantity_sold,
    )
    return ticket
