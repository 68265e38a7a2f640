"""Reservation validation and seat claiming shared by checkout, RSVP and walk-ins."""

import enum
import typing as t
from dataclasses import dataclass
from uuid import UUID

import structlog

from events.exceptions import InventoryConflictError, RejectionReason, ReservationRejectedError
from events.models import Ticket, TicketTier

from . import inventory

logger = structlog.get_logger(__name__)


class Flow(enum.StrEnum):
    CHECKOUT = "checkout"
    RSVP = "rsvp"
    WALK_IN = "walk_in"


@dataclass(frozen=True)
class ReservationDecision:
    accepted: bool
    reason: RejectionReason | None = None
    message: str = ""

    def raise_if_rejected(self) -> None:
        if not self.accepted:
            raise ReservationRejectedError(t.cast(RejectionReason, self.reason), self.message)


ACCEPTED = ReservationDecision(accepted=True)


def _tickets(n: int) -> str:
    return "ticket" if n == 1 else "tickets"


def _reject(reason: RejectionReason, message: str) -> ReservationDecision:
    return ReservationDecision(accepted=False, reason=reason, message=message)


def validate_reservation(
    tier: TicketTier,
    requested_quantity: int,
    existing_quantity_for_contact: int | None,
    *,
    flow: Flow,
) -> ReservationDecision:
    """Decide whether ``requested_quantity`` seats may be claimed on ``tier``.

    The rules run in order: price class against the entry path, remaining capacity, then the
    per-contact cap. Walk-ins issued by staff skip the price class and per-contact rules but
    are still bound by capacity.

    Args:
        tier: A freshly read tier. Never a snapshot carried over from page load.
        requested_quantity: Seats requested, at least 1.
        existing_quantity_for_contact: Seats the contact already holds on this tier, or None
            when the buyer supplied no identifier.
        flow: The entry path.
    """
    if flow == Flow.RSVP and not tier.is_free:
        return _reject(RejectionReason.USE_CHECKOUT, "This tier is not free. Please use checkout instead.")
    if flow == Flow.CHECKOUT and tier.is_free:
        return _reject(RejectionReason.USE_RSVP, "This tier is free. Please use RSVP instead.")

    remaining = tier.quantity_total - tier.quantity_sold
    if remaining <= 0:
        return _reject(RejectionReason.SOLD_OUT, "This tier is sold out.")
    if requested_quantity > remaining:
        return _reject(
            RejectionReason.INSUFFICIENT_REMAINING, f"Only {remaining} {_tickets(remaining)} remaining."
        )

    if flow == Flow.WALK_IN or tier.max_per_contact is None or existing_quantity_for_contact is None:
        return ACCEPTED

    cap = tier.max_per_contact
    if existing_quantity_for_contact + requested_quantity > cap:
        allowed = max(cap - existing_quantity_for_contact, 0)
        if allowed == 0:
            return _reject(
                RejectionReason.CONTACT_CAP_REACHED,
                f"You have already reached the maximum of {cap} {_tickets(cap)} for this tier.",
            )
        verb = "purchase" if flow == Flow.CHECKOUT else "reserve"
        return _reject(
            RejectionReason.CONTACT_CAP_EXCEEDED,
            f"You can only {verb} {allowed} more {_tickets(allowed)} for this tier.",
        )
    return ACCEPTED


def existing_quantity_for_contact(tier: TicketTier, *, email: str = "", phone: str = "") -> int | None:
    """Seats held on ``tier`` by the contact identified by email, or else phone.

    Cancelled and refunded tickets do not count. Returns None when there is no identifier.
    """
    if not (email or phone):
        return None
    return Ticket.objects.holding().filter(tier=tier).for_contact(email=email, phone=phone).total_quantity()


def check_reservation(tier_id: UUID, quantity: int, *, flow: Flow, email: str = "", phone: str = "") -> TicketTier:
    """Lock and freshly read the tier, then validate the request against it.

    Must be called inside ``transaction.atomic``.

    Raises:
        ReservationRejectedError: If the request breaks a reservation rule.
    """
    tier = TicketTier.objects.select_for_update().get(pk=tier_id)
    existing = existing_quantity_for_contact(tier, email=email, phone=phone)
    validate_reservation(tier, quantity, existing, flow=flow).raise_if_rejected()
    return tier


def claim_seats(tier_id: UUID, quantity: int, *, flow: Flow, email: str = "", phone: str = "") -> TicketTier:
    """Validate against a fresh read and atomically add ``quantity`` to the tier's sold count.

    A conflicting concurrent claim makes the conditional update fail. The request is then
    validated again and retried once. If it still conflicts it is rejected as sold out.
    Must be called inside ``transaction.atomic``.

    Raises:
        ReservationRejectedError: If the request breaks a reservation rule or the seats are gone.
    """
    for attempt in (1, 2):
        tier = check_reservation(tier_id, quantity, flow=flow, email=email, phone=phone)
        try:
            tier.quantity_sold = inventory.adjust_quantity_sold(tier.pk, quantity)
        except InventoryConflictError:
            logger.warning("reservation_claim_conflict", tier_id=str(tier_id), quantity=quantity, attempt=attempt)
            continue
        return tier

    check_reservation(tier_id, quantity, flow=flow, email=email, phone=phone)
    raise ReservationRejectedError(RejectionReason.SOLD_OUT, "This tier is sold out.")
