import uuid
from unittest.mock import MagicMock, patch

import pytest

from events.models import Event, Ticket, TicketTier
from notifications.service.channels import SendResult
from notifications.tasks import send_rsvp_confirmation

pytestmark = pytest.mark.django_db


@pytest.fixture
def rsvp_ticket(event: Event, free_tier: TicketTier) -> Ticket:
    return Ticket.objects.create(
        event=event,
        tier=free_tier,
        attendee_name="Ada Lovelace",
        attendee_email="ada@example.com",
        quantity=2,
        status=Ticket.Status.CONFIRMED,
        inventory_counted=True,
    )


@patch("notifications.tasks.EmailChannel")
def test_sends_confirmation(mock_channel: MagicMock, rsvp_ticket: Ticket) -> None:
    mock_channel.return_value.send.return_value = SendResult(success=True, provider_message_id="re_1")

    assert send_rsvp_confirmation(str(rsvp_ticket.id)) is True

    kwargs = mock_channel.return_value.send.call_args.kwargs
    assert kwargs["to"] == "ada@example.com"
    assert kwargs["subject"] == "Your RSVP for Harvest Dinner is confirmed"
    assert rsvp_ticket.ticket_code in kwargs["text_body"]


@patch("notifications.tasks.EmailChannel")
def test_failure_is_not_raised(mock_channel: MagicMock, rsvp_ticket: Ticket, caplog: pytest.LogCaptureFixture) -> None:
    mock_channel.return_value.send.return_value = SendResult(success=False, error="boom")

    assert send_rsvp_confirmation(str(rsvp_ticket.id)) is False
    assert "rsvp_confirmation_failed" in caplog.text


def test_missing_ticket() -> None:
    assert send_rsvp_confirmation(str(uuid.uuid4())) is False


def test_ticket_without_email(rsvp_ticket: Ticket) -> None:
    Ticket.objects.filter(pk=rsvp_ticket.pk).update(attendee_email="")

    assert send_rsvp_confirmation(str(rsvp_ticket.id)) is False
