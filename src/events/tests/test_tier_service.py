"""Tests for ticket tier management."""

import typing as t
from unittest.mock import MagicMock, patch

import pytest
import stripe
from ninja.errors import HttpError

from events.models import Event, Ticket, TicketTier
from events.service import tier_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def mock_stripe() -> t.Iterator[dict[str, MagicMock]]:
    with (
        patch("stripe.Product.create", return_value=MagicMock(id="prod_new")) as product_create,
        patch("stripe.Price.create", return_value=MagicMock(id="price_new")) as price_create,
        patch("stripe.Price.modify") as price_modify,
    ):
        yield {"product_create": product_create, "price_create": price_create, "price_modify": price_modify}


class TestCreateTier:
    def test_free_tier_skips_stripe(self, event: Event, mock_stripe: dict[str, MagicMock]) -> None:
        tier = tier_service.create_tier(event, {"name": "RSVP", "price_cents": 0, "quantity_total": 30})

        assert tier.is_free
        assert tier.stripe_price_id == ""
        mock_stripe["product_create"].assert_not_called()
        mock_stripe["price_create"].assert_not_called()

    def test_paid_tier_registers_price(self, event: Event, mock_stripe: dict[str, MagicMock]) -> None:
        tier = tier_service.create_tier(event, {"name": "VIP", "price_cents": 12000, "quantity_total": 5})

        assert tier.stripe_product_id == "prod_new"
        assert tier.stripe_price_id == "price_new"
        assert mock_stripe["product_create"].call_args.kwargs["name"] == "Harvest Dinner - VIP"
        mock_stripe["price_create"].assert_called_once_with(product="prod_new", unit_amount=12000, currency="usd")

    def test_stripe_failure_still_creates_tier(
        self, event: Event, mock_stripe: dict[str, MagicMock], caplog: pytest.LogCaptureFixture
    ) -> None:
        mock_stripe["price_create"].side_effect = stripe.APIConnectionError("down")

        tier = tier_service.create_tier(event, {"name": "VIP", "price_cents": 12000, "quantity_total": 5})

        assert TicketTier.objects.filter(pk=tier.pk).exists()
        assert tier.stripe_price_id == ""
        assert "stripe_price_registration_failed" in caplog.text

    def test_sort_order_defaults_to_end(self, event: Event, free_tier: TicketTier, paid_tier: TicketTier) -> None:
        tier = tier_service.create_tier(event, {"name": "Late", "price_cents": 0, "quantity_total": 5})

        assert tier.sort_order == 2

    def test_rejects_tiers_over_event_capacity(self, event: Event, free_tier: TicketTier) -> None:
        with pytest.raises(HttpError) as exc_info:
            tier_service.create_tier(event, {"name": "Huge", "price_cents": 0, "quantity_total": 91})

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "Total tier quantity (101) exceeds event capacity (100)."

    def test_no_capacity_means_no_limit(self, event: Event) -> None:
        event.capacity = None
        event.save()

        tier = tier_service.create_tier(event, {"name": "Open", "price_cents": 0, "quantity_total": 5000})

        assert tier.quantity_total == 5000


class TestUpdateTier:
    def test_cannot_drop_below_sold(self, free_tier: TicketTier) -> None:
        TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=6)

        with pytest.raises(HttpError) as exc_info:
            tier_service.update_tier(free_tier, {"quantity_total": 5})

        assert str(exc_info.value) == "Quantity cannot be less than tickets already sold (6)."

    def test_can_drop_to_sold(self, free_tier: TicketTier) -> None:
        TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=6)

        tier = tier_service.update_tier(free_tier, {"quantity_total": 6})

        assert tier.quantity_total == 6
        assert tier.remaining == 0

    def test_price_change_replaces_stripe_price(
        self, paid_tier: TicketTier, mock_stripe: dict[str, MagicMock]
    ) -> None:
        tier = tier_service.update_tier(paid_tier, {"price_cents": 5000})

        assert tier.stripe_price_id == "price_new"
        mock_stripe["product_create"].assert_not_called()
        mock_stripe["price_create"].assert_called_once_with(product="prod_test", unit_amount=5000, currency="usd")
        mock_stripe["price_modify"].assert_called_once_with("price_test", active=False)

    def test_name_change_keeps_stripe_price(self, paid_tier: TicketTier, mock_stripe: dict[str, MagicMock]) -> None:
        tier = tier_service.update_tier(paid_tier, {"name": "Chef's Table"})

        assert tier.name == "Chef's Table"
        assert tier.stripe_price_id == "price_test"
        mock_stripe["price_create"].assert_not_called()

    def test_becoming_free_drops_price(self, paid_tier: TicketTier, mock_stripe: dict[str, MagicMock]) -> None:
        tier = tier_service.update_tier(paid_tier, {"price_cents": 0})

        assert tier.stripe_price_id == ""
        mock_stripe["price_modify"].assert_called_once_with("price_test", active=False)


class TestDeleteTier:
    def test_deletes_unsold_tier(self, free_tier: TicketTier) -> None:
        tier_service.delete_tier(free_tier)

        assert not TicketTier.objects.filter(pk=free_tier.pk).exists()

    def test_sold_tier_cannot_be_deleted(self, free_tier: TicketTier) -> None:
        TicketTier.objects.filter(pk=free_tier.pk).update(quantity_sold=1)

        with pytest.raises(HttpError, match="Cannot delete a tier that has sold tickets."):
            tier_service.delete_tier(free_tier)

    def test_tier_with_pending_ticket_cannot_be_deleted(self, event: Event, paid_tier: TicketTier) -> None:
        Ticket.objects.create(event=event, tier=paid_tier, attendee_name="Ada", attendee_email="ada@example.com")

        with pytest.raises(HttpError, match="Cannot delete a tier that still has tickets."):
            tier_service.delete_tier(paid_tier)


class TestReorderTiers:
    def test_reorders(self, event: Event, free_tier: TicketTier, paid_tier: TicketTier) -> None:
        tier_service.reorder_tiers(event, [paid_tier.pk, free_tier.pk])

        assert list(TicketTier.objects.for_event(event.pk)) == [paid_tier, free_tier]

    def test_foreign_tier_rejected(self, event: Event, past_event: Event, free_tier: TicketTier) -> None:
        other = TicketTier.objects.create(event=past_event, name="Other", quantity_total=5)

        with pytest.raises(HttpError, match="Tier not found for this event."):
            tier_service.reorder_tiers(event, [free_tier.pk, other.pk])
