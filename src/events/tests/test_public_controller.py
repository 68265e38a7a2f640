"""Tests for the guest-facing API."""

import typing as t
import uuid
from unittest.mock import MagicMock, patch

import orjson
import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from events.models import Event, Ticket, TicketTier

pytestmark = pytest.mark.django_db


@pytest.fixture
def mock_session_create() -> t.Iterator[MagicMock]:
    with patch("events.service.checkout_service.Session.create") as mock_create:
        mock_create.return_value = MagicMock(id="cs_test_123", url="https://checkout.stripe.com/c/pay/cs_test_123")
        yield mock_create


def _post(client: Client, url: str, payload: dict[str, t.Any]) -> t.Any:
    return client.post(url, data=orjson.dumps(payload), content_type="application/json")


class TestPublicEvent:
    def test_shows_tiers_with_remaining(
        self, client: Client, event: Event, free_tier: TicketTier, paid_tier: TicketTier
    ) -> None:
        TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=4)

        response = client.get(reverse("api:get_public_event", kwargs={"slug": event.slug}))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Harvest Dinner"
        assert [(tier["name"], tier["remaining"], tier["is_free"]) for tier in data["tiers"]] == [
            ("General Admission", 6, True),
            ("Dinner Seat", 20, False),
        ]
        assert "quantity_sold" not in data["tiers"][0]

    def test_draft_is_not_found(self, client: Client, event: Event) -> None:
        Event.objects.filter(pk=event.pk).update(status=Event.Status.DRAFT)

        response = client.get(reverse("api:get_public_event", kwargs={"slug": event.slug}))

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Event not found or no longer available."}


class TestCheckout:
    def test_returns_checkout_url(
        self, client: Client, event: Event, paid_tier: TicketTier, mock_session_create: MagicMock
    ) -> None:
        url = reverse("api:create_checkout", kwargs={"event_id": event.id})
        payload = {"tier_id": str(paid_tier.id), "attendee_name": "Ada", "attendee_email": "ada@example.com"}

        response = _post(client, url, payload)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["checkout_url"] == "https://checkout.stripe.com/c/pay/cs_test_123"
        ticket = Ticket.objects.get(pk=body["data"]["ticket_id"])
        assert ticket.status == Ticket.Status.PENDING

    def test_email_is_required(self, client: Client, event: Event, paid_tier: TicketTier) -> None:
        url = reverse("api:create_checkout", kwargs={"event_id": event.id})

        response = _post(client, url, {"tier_id": str(paid_tier.id), "attendee_name": "Ada"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert not Ticket.objects.exists()

    def test_cap_rejection_has_reason(
        self, client: Client, event: Event, paid_tier: TicketTier, mock_session_create: MagicMock
    ) -> None:
        url = reverse("api:create_checkout", kwargs={"event_id": event.id})
        payload = {
            "tier_id": str(paid_tier.id),
            "attendee_name": "Ada",
            "attendee_email": "ada@example.com",
            "quantity": 3,
        }

        response = _post(client, url, payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "You can only purchase 2 more tickets for this tier.",
            "reason": "contact_cap_exceeded",
        }
        mock_session_create.assert_not_called()

    def test_free_tier_redirects_to_rsvp(self, client: Client, event: Event, free_tier: TicketTier) -> None:
        url = reverse("api:create_checkout", kwargs={"event_id": event.id})
        payload = {"tier_id": str(free_tier.id), "attendee_name": "Ada", "attendee_email": "ada@example.com"}

        response = _post(client, url, payload)

        assert response.status_code == 400
        assert response.json()["reason"] == "use_rsvp"


class TestRsvp:
    def test_confirms_immediately(self, client: Client, event: Event, free_tier: TicketTier) -> None:
        url = reverse("api:create_rsvp", kwargs={"event_id": event.id})
        payload = {"tier_id": str(free_tier.id), "attendee_name": "Ada", "quantity": 2}

        response = _post(client, url, payload)

        assert response.status_code == 200
        ticket = Ticket.objects.get(pk=response.json()["data"]["ticket_id"])
        assert ticket.status == Ticket.Status.CONFIRMED
        free_tier.refresh_from_db()
        assert free_tier.quantity_sold == 2

    def test_sold_out(self, client: Client, event: Event, free_tier: TicketTier) -> None:
        TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=10)
        url = reverse("api:create_rsvp", kwargs={"event_id": event.id})

        response = _post(client, url, {"tier_id": str(free_tier.id), "attendee_name": "Ada"})

        assert response.status_code == 400
        assert response.json()["reason"] == "sold_out"

    def test_unknown_event(self, client: Client, free_tier: TicketTier) -> None:
        url = reverse("api:create_rsvp", kwargs={"event_id": uuid.uuid4()})

        response = _post(client, url, {"tier_id": str(free_tier.id), "attendee_name": "Ada"})

        assert response.status_code == 404


def test_public_ticket(client: Client, event: Event, free_tier: TicketTier) -> None:
    ticket = Ticket.objects.create(
        event=event, tier=free_tier, attendee_name="Ada", status=Ticket.Status.CONFIRMED, inventory_counted=True
    )

    response = client.get(reverse("api:get_public_ticket", kwargs={"ticket_id": ticket.id}))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ticket_code"] == ticket.ticket_code
    assert data["tier_name"] == "General Admission"
    assert data["event_slug"] == "harvest-dinner-abc123"
