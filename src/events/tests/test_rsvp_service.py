"""Tests for the free RSVP path."""

from unittest.mock import MagicMock, patch

import pytest

from events.exceptions import RejectionReason, ReservationRejectedError
from events.models import Event, Ticket, TicketTier
from events.service.rsvp_service import create_rsvp

pytestmark = pytest.mark.django_db


def _rsvp(event: Event, tier: TicketTier, **kwargs: object) -> Ticket:
    params = {"event_id": event.id, "tier_id": tier.id, "attendee_name": "Grace Hopper", "quantity": 1}
    params.update(kwargs)
    return create_rsvp(**params)  # type: ignore[arg-type]


def test_confirms_ticket_and_counts_seats(event: Event, free_tier: TicketTier) -> None:
    ticket = _rsvp(event, free_tier, attendee_email="grace@example.com", quantity=3)

    assert ticket.status == Ticket.Status.CONFIRMED
    assert ticket.inventory_counted is True
    assert ticket.amount_paid_cents == 0
    assert ticket.ticket_code.startswith("TIX-")
    free_tier.refresh_from_db()
    assert free_tier.quantity_sold == 3


def test_nine_of_ten_accepts_one_and_rejects_two(event: Event, free_tier: TicketTier) -> None:
    TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=9)

    with pytest.raises(ReservationRejectedError) as exc_info:
        _rsvp(event, free_tier, quantity=2)
    assert exc_info.value.message == "Only 1 ticket remaining."

    ticket = _rsvp(event, free_tier, quantity=1)

    free_tier.refresh_from_db()
    assert free_tier.quantity_sold == 10
    assert ticket.status == Ticket.Status.CONFIRMED


def test_priced_tier_is_rejected_without_ticket(event: Event, paid_tier: TicketTier) -> None:
    with pytest.raises(ReservationRejectedError) as exc_info:
        _rsvp(event, paid_tier)

    assert exc_info.value.reason == RejectionReason.USE_CHECKOUT
    assert exc_info.value.message == "This tier is not free. Please use checkout instead."
    assert not Ticket.objects.exists()


def test_attempts_beyond_remaining_accept_exactly_remaining(event: Event, free_tier: TicketTier) -> None:
    accepted = 0
    rejections = []
    for i in range(13):
        try:
            _rsvp(event, free_tier, attendee_email=f"guest{i}@example.com")
            accepted += 1
        except ReservationRejectedError as e:
            rejections.append(e.reason)

    free_tier.refresh_from_db()
    assert accepted == 10
    assert free_tier.quantity_sold == 10
    assert rejections == [RejectionReason.SOLD_OUT] * 3


def test_cap_keyed_by_phone_without_email(event: Event, free_tier: TicketTier) -> None:
    free_tier.max_per_contact = 1
    free_tier.save()
    _rsvp(event, free_tier, attendee_phone="+15550002")

    with pytest.raises(ReservationRejectedError) as exc_info:
        _rsvp(event, free_tier, attendee_phone="+15550002")

    assert exc_info.value.reason == RejectionReason.CONTACT_CAP_REACHED


def test_confirmation_queued_after_commit(
    event: Event, free_tier: TicketTier, django_capture_on_commit_callbacks: MagicMock
) -> None:
    with patch("notifications.tasks.send_rsvp_confirmation.delay") as mock_delay:
        with django_capture_on_commit_callbacks(execute=True):
            ticket = _rsvp(event, free_tier, attendee_email="grace@example.com")

    mock_delay.assert_called_once_with(str(ticket.id))


def test_no_confirmation_without_email(
    event: Event, free_tier: TicketTier, django_capture_on_commit_callbacks: MagicMock
) -> None:
    with patch("notifications.tasks.send_rsvp_confirmation.delay") as mock_delay:
        with django_capture_on_commit_callbacks(execute=True):
            _rsvp(event, free_tier, attendee_phone="+15550003")

    mock_delay.assert_not_called()

