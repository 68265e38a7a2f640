"""Tests for the door: attendee lists, walk-ins and check-in."""

import csv
import io
import uuid
from datetime import UTC, datetime

import pytest
from ninja.errors import HttpError

from accounts.models import GuestlistUser
from events.exceptions import RejectionReason, ReservationRejectedError
from events.models import Event, Ticket, TicketTier
from events.service import attendee_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def confirmed_ticket(event: Event, free_tier: TicketTier) -> Ticket:
    return Ticket.objects.create(
        event=event,
        tier=free_tier,
        attendee_name="Grace Hopper",
        attendee_email="grace@example.com",
        status=Ticket.Status.CONFIRMED,
        inventory_counted=True,
    )


class TestWalkIn:
    def test_issues_confirmed_ticket(self, event: Event, paid_tier: TicketTier, team_helper: GuestlistUser) -> None:
        ticket = attendee_service.create_walk_in(
            event, paid_tier.pk, attendee_name="Walk In", quantity=3, issued_by=team_helper
        )

        paid_tier.refresh_from_db()
        assert ticket.status == Ticket.Status.CONFIRMED
        assert ticket.inventory_counted is True
        assert ticket.amount_paid_cents == 0
        assert ticket.created_by == team_helper
        # Staff are not bound by the per-contact cap of 2.
        assert ticket.quantity == 3
        assert paid_tier.quantity_sold == 3

    def test_cannot_exceed_tier_total(self, event: Event, free_tier: TicketTier) -> None:
        TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=9)

        with pytest.raises(ReservationRejectedError) as exc_info:
            attendee_service.create_walk_in(event, free_tier.pk, attendee_name="Late", quantity=2)

        assert exc_info.value.reason == RejectionReason.INSUFFICIENT_REMAINING
        assert not Ticket.objects.exists()

    def test_tier_of_another_event(self, past_event: Event, free_tier: TicketTier) -> None:
        with pytest.raises(HttpError, match="Tier not found for this event."):
            attendee_service.create_walk_in(past_event, free_tier.pk, attendee_name="Lost")

    def test_unknown_tier(self, event: Event) -> None:
        with pytest.raises(HttpError) as exc_info:
            attendee_service.create_walk_in(event, uuid.uuid4(), attendee_name="Lost")

        assert exc_info.value.status_code == 404


class TestCheckIn:
    def test_toggles_both_ways(self, confirmed_ticket: Ticket) -> None:
        ticket = attendee_service.toggle_check_in(confirmed_ticket)
        assert ticket.status == Ticket.Status.CHECKED_IN
        assert ticket.checked_in_at is not None

        ticket = attendee_service.toggle_check_in(ticket)
        assert ticket.status == Ticket.Status.CONFIRMED
        assert ticket.checked_in_at is None

    @pytest.mark.parametrize("status", [Ticket.Status.PENDING, Ticket.Status.CANCELLED, Ticket.Status.REFUNDED])
    def test_other_statuses_rejected(self, confirmed_ticket: Ticket, status: Ticket.Status) -> None:
        Ticket.objects.filter(pk=confirmed_ticket.pk).update(status=status)

        with pytest.raises(HttpError, match="Ticket cannot be toggled in its current status."):
            attendee_service.toggle_check_in(confirmed_ticket)


class TestListAndLookup:
    def test_filters(self, event: Event, free_tier: TicketTier, confirmed_ticket: Ticket) -> None:
        Ticket.objects.create(event=event, tier=free_tier, attendee_name="Alan Turing", status=Ticket.Status.PENDING)

        assert [t.attendee_name for t in attendee_service.list_attendees(event)] == ["Alan Turing", "Grace Hopper"]
        assert list(attendee_service.list_attendees(event, status=Ticket.Status.CONFIRMED)) == [confirmed_ticket]
        assert list(attendee_service.list_attendees(event, search="GRACE@")) == [confirmed_ticket]
        assert list(attendee_service.list_attendees(event, search=confirmed_ticket.ticket_code)) == [confirmed_ticket]

    def test_lookup_is_case_insensitive(self, event: Event, confirmed_ticket: Ticket) -> None:
        found = attendee_service.lookup_ticket(event, f"  {confirmed_ticket.ticket_code.lower()} ")

        assert found == confirmed_ticket

    def test_lookup_scoped_to_event(self, past_event: Event, confirmed_ticket: Ticket) -> None:
        with pytest.raises(HttpError, match="Ticket not found."):
            attendee_service.lookup_ticket(past_event, confirmed_ticket.ticket_code)


class TestExport:
    def test_rows_are_escaped_and_amounts_formatted(
        self, event: Event, paid_tier: TicketTier, confirmed_ticket: Ticket
    ) -> None:
        checked_in_at = datetime(2026, 5, 1, 19, 30, tzinfo=UTC)
        Ticket.objects.create(
            event=event,
            tier=paid_tier,
            attendee_name='Lovelace, Ada "The Countess"',
            attendee_email="ada@example.com",
            attendee_phone="+15550100",
            quantity=2,
            amount_paid_cents=9050,
            status=Ticket.Status.CHECKED_IN,
            checked_in_at=checked_in_at,
            inventory_counted=True,
        )

        content = attendee_service.export_attendees_csv(event)

        assert '"Lovelace, Ada ""The Countess"""' in content
        rows = list(csv.reader(io.StringIO(content)))
        assert rows == [
            ["Name", "Email", "Phone", "Tier", "Quantity", "Amount Paid", "Status", "Checked In At"],
            ["Grace Hopper", "grace@example.com", "", "General Admission", "1", "0.00", "confirmed", ""],
            [
                'Lovelace, Ada "The Countess"',
                "ada@example.com",
                "+15550100",
                "Dinner Seat",
                "2",
                "90.50",
                "checked_in",
                checked_in_at.isoformat(),
            ],
        ]

    def test_empty_event_has_header_only(self, past_event: Event) -> None:
        rows = list(csv.reader(io.StringIO(attendee_service.export_attendees_csv(past_event))))

        assert rows == [["Name", "Email", "Phone", "Tier", "Quantity", "Amount Paid", "Status", "Checked In At"]]

    def test_filename_drops_unsafe_characters(self, event: Event) -> None:
        event.title = "Harvest Dinner: 2026/Fall"

        assert attendee_service.export_filename(event) == "Harvest Dinner 2026Fall-attendees.csv"
