import typing as t
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

import stripe
import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from ninja.errors import HttpError
from stripe.checkout import Session

from common.models import SiteSettings
from events.models import Event, Ticket, TicketTier

from .reservation import Flow, check_reservation

logger = structlog.get_logger(__name__)

stripe.api_key = settings.STRIPE_SECRET_KEY


@dataclass(frozen=True)
class CheckoutResult:
    checkout_url: str
    ticket: Ticket


def get_public_event(event_id: UUID) -> Event:
    """Re-read the event and make sure it still accepts visitors."""
    event = Event.objects.public().filter(pk=event_id).first()
    if event is None:
        raise HttpError(404, "Event not found or no longer available.")
    return event


def get_event_tier(event: Event, tier_id: UUID) -> TicketTier:
    tier = TicketTier.objects.filter(pk=tier_id, event=event).first()
    if tier is None:
        raise HttpError(404, "Ticket tier not found.")
    return tier


def _line_item(event: Event, tier: TicketTier, quantity: int) -> dict[str, t.Any]:
    if tier.stripe_price_id:
        return {"price": tier.stripe_price_id, "quantity": quantity}
    return {
        "price_data": {
            "currency": settings.DEFAULT_CURRENCY.lower(),
            "product_data": {"name": f"{event.title} - {tier.name}"},
            "unit_amount": tier.price_cents,
        },
        "quantity": quantity,
    }


def _create_stripe_checkout_session(event: Event, tier: TicketTier, ticket: Ticket) -> Session:
    """Create the hosted Stripe Checkout Session for a pending ticket.

    Raises:
        stripe.StripeError: If the Stripe API call fails.
    """
    frontend_base_url = SiteSettings.get_solo().frontend_base_url.rstrip("/")
    expires_at = timezone.now() + timedelta(minutes=settings.PAYMENT_DEFAULT_EXPIRY_MINUTES)
    return Session.create(
        mode="payment",
        customer_email=ticket.attendee_email,
        line_items=[_line_item(event, tier, ticket.quantity)],  # type: ignore[list-item]
        success_url=(
            f"{frontend_base_url}/e/{event.slug}/confirm?ticket_id={ticket.id}&session_id={{CHECKOUT_SESSION_ID}}"
        ),
        cancel_url=f"{frontend_base_url}/e/{event.slug}",
        metadata={
            "event_id": str(event.id),
            "tier_id": str(tier.id),
            "ticket_id": str(ticket.id),
        },
        expires_at=int(expires_at.timestamp()),
    )


def create_checkout(
    *,
    event_id: UUID,
    tier_id: UUID,
    attendee_name: str,
    attendee_email: str,
    attendee_phone: str = "",
    quantity: int = 1,
) -> CheckoutResult:
    """Start a paid purchase: create a pending ticket and a hosted Stripe checkout for it.

    The pending ticket does not hold inventory. Seats are only counted once Stripe confirms the
    payment through the webhook. If Stripe refuses to create the session the pending ticket is
    removed again, so an unpaid ticket never exists without a checkout behind it.

    Raises:
        HttpError: If the event or tier is gone, or Stripe fails.
        ReservationRejectedError: If the tier is free, sold out, or the buyer's cap is reached.
    """
    event = get_public_event(event_id)
    tier = get_event_tier(event, tier_id)

    with transaction.atomic():
        tier = check_reservation(tier.pk, quantity, flow=Flow.CHECKOUT, email=attendee_email)
        ticket = Ticket.objects.create(
            event=event,
            tier=tier,
            attendee_name=attendee_name,
            attendee_email=attendee_email,
            attendee_phone=attendee_phone,
            quantity=quantity,
            status=Ticket.Status.PENDING,
            amount_paid_cents=0,
        )

    try:
        session = _create_stripe_checkout_session(event, tier, ticket)
    except stripe.StripeError as e:
        logger.error(
            "stripe_checkout_session_failed",
            event_id=str(event.id),
            tier_id=str(tier.id),
            ticket_id=str(ticket.id),
            error=str(e),
        )
        ticket.delete()
        raise HttpError(502, "Failed to start checkout. Please try again.") from e

    ticket.stripe_session_id = session.id
    ticket.save(update_fields=["stripe_session_id", "updated_at"])
    logger.info(
        "stripe_checkout_session_created",
        event_id=str(event.id),
        tier_id=str(tier.id),
        ticket_id=str(ticket.id),
        session_id=session.id,
        quantity=quantity,
    )
    return CheckoutResult(checkout_url=t.cast(str, session.url), ticket=ticket)
