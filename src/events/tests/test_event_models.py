import re
from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.utils import timezone

from events.models import Contact, Event, Ticket, TicketTier, generate_ticket_code

pytestmark = pytest.mark.django_db


def test_generate_ticket_code() -> None:
    code = generate_ticket_code()

    assert re.fullmatch(r"TIX-[A-HJ-NP-Z2-9]{8}", code)


def test_ticket_tier_must_belong_to_event(past_event: Event, free_tier: TicketTier) -> None:
    with pytest.raises(ValidationError):
        Ticket.objects.create(event=past_event, tier=free_tier, attendee_name="Mixed Up")


def test_event_window_validation() -> None:
    start = timezone.now()

    with pytest.raises(ValidationError) as exc_info:
        Event.objects.create(title="Backwards", slug="backwards-aaaaaa", date_start=start, date_end=start)

    assert exc_info.value.message_dict["date_end"] == ["End date must be after start date"]


def test_event_has_ended(event: Event, past_event: Event) -> None:
    assert not event.has_ended
    assert past_event.has_ended


def test_public_queryset(event: Event, past_event: Event) -> None:
    Event.objects.filter(pk=past_event.pk).update(link_active=False)

    assert list(Event.objects.public()) == [event]


def test_tier_remaining(free_tier: TicketTier) -> None:
    free_tier.quantity_sold = 4

    assert free_tier.remaining == 6
    assert free_tier.is_free


class TestContact:
    def test_requires_identifier(self, event: Event) -> None:
        with pytest.raises(ValidationError):
            Contact.objects.create(event=event, first_name="Nobody")

    def test_email_unique_per_event_ignoring_case(self, event: Event) -> None:
        Contact.objects.create(event=event, email="ada@example.com")

        with pytest.raises((ValidationError, IntegrityError)):
            Contact.objects.create(event=event, email="ADA@example.com")

    def test_blank_phones_do_not_collide(self, event: Event) -> None:
        Contact.objects.create(event=event, email="a@example.com")
        Contact.objects.create(event=event, email="b@example.com")

        assert Contact.objects.filter(event=event, phone="").count() == 2

    @pytest.mark.parametrize(
        "channel,wants_email,wants_sms",
        [
            (Contact.Channel.EMAIL, True, False),
            (Contact.Channel.SMS, False, True),
            (Contact.Channel.BOTH, True, True),
            (Contact.Channel.NONE, False, False),
        ],
    )
    def test_channel_flags(self, event: Event, channel: str, wants_email: bool, wants_sms: bool) -> None:
        contact = Contact(event=event, email="a@example.com", phone="+1555", invitation_channel=channel)

        assert contact.wants_email is wants_email
        assert contact.wants_sms is wants_sms

    def test_contact_queries(self, event: Event) -> None:
        invited = Contact.objects.create(event=event, email="a@example.com", invited_at=timezone.now())
        fresh = Contact.objects.create(event=event, email="b@example.com", invitation_channel=Contact.Channel.EMAIL)

        assert list(Contact.objects.uninvited()) == [fresh]
        assert list(Contact.objects.with_email(" A@example.com ")) == [invited]


def test_holding_tickets_exclude_cancelled(event: Event, free_tier: TicketTier) -> None:
    kept = Ticket.objects.create(event=event, tier=free_tier, attendee_name="A", status=Ticket.Status.PENDING)
    Ticket.objects.create(event=event, tier=free_tier, attendee_name="B", status=Ticket.Status.CANCELLED)
    Ticket.objects.create(
        event=event,
        tier=free_tier,
        attendee_name="C",
        status=Ticket.Status.CONFIRMED,
        purchased_at=timezone.now() - timedelta(days=1),
        attendee_email="c@example.com",
    )

    assert kept in Ticket.objects.holding()
    assert Ticket.objects.holding().count() == 2
    assert Ticket.objects.holding().for_contact(email="C@EXAMPLE.com").total_quantity() == 1
