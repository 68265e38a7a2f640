import typing as t
from uuid import UUID

import stripe
import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from ninja.errors import HttpError

from events.models import Event, TicketTier

logger = structlog.get_logger(__name__)

stripe.api_key = settings.STRIPE_SECRET_KEY


def _assert_within_capacity(event: Event, quantity_total: int, exclude_tier: TicketTier | None = None) -> None:
    """Soft capacity check: the tiers of an event should not promise more seats than the venue holds."""
    if event.capacity is None:
        return
    others = TicketTier.objects.filter(event=event)
    if exclude_tier is not None:
        others = others.exclude(pk=exclude_tier.pk)
    total = int(others.aggregate(total=Sum("quantity_total"))["total"] or 0) + quantity_total
    if total > event.capacity:
        raise HttpError(400, f"Total tier quantity ({total}) exceeds event capacity ({event.capacity}).")


def _register_stripe_price(event: Event, tier: TicketTier) -> None:
    """Create (or reuse) the tier's Stripe product and register its current price.

    On failure the tier keeps no price reference and checkout falls back to inline price data.
    """
    try:
        if not tier.stripe_product_id:
            product = stripe.Product.create(
                name=f"{event.title} - {tier.name}",
                metadata={"event_id": str(event.id), "tier_id": str(tier.id)},
            )
            tier.stripe_product_id = product.id
        price = stripe.Price.create(
            product=tier.stripe_product_id,
            unit_amount=tier.price_cents,
            currency=settings.DEFAULT_CURRENCY.lower(),
        )
        tier.stripe_price_id = price.id
    except stripe.StripeError as e:
        logger.error("stripe_price_registration_failed", tier_id=str(tier.id), error=str(e))
        tier.stripe_price_id = ""


def _archive_stripe_price(price_id: str) -> None:
    if not price_id:
        return
    try:
        stripe.Price.modify(price_id, active=False)
    except stripe.StripeError as e:
        logger.warning("stripe_price_archive_failed", price_id=price_id, error=str(e))


def create_tier(event: Event, tier_data: dict[str, t.Any]) -> TicketTier:
    """Create a ticket tier, registering a Stripe price for paid tiers."""
    _assert_within_capacity(event, tier_data["quantity_total"])
    if "sort_order" not in tier_data:
        tier_data["sort_order"] = TicketTier.objects.filter(event=event).count()

    tier = TicketTier(event=event, **tier_data)
    if not tier.is_free:
        _register_stripe_price(event, tier)
    tier.save()
    logger.info("ticket_tier_created", event_id=str(event.id), tier_id=str(tier.id), price_cents=tier.price_cents)
    return tier


@transaction.atomic
def update_tier(tier: TicketTier, tier_data: dict[str, t.Any]) -> TicketTier:
    """Update a tier. The total can never drop below what is already sold."""
    tier = TicketTier.objects.select_for_update().select_related("event").get(pk=tier.pk)
    quantity_total = tier_data.get("quantity_total", tier.quantity_total)
    if quantity_total < tier.quantity_sold:
        raise HttpError(400, f"Quantity cannot be less than tickets already sold ({tier.quantity_sold}).")
    _assert_within_capacity(tier.event, quantity_total, exclude_tier=tier)

    old_price_cents = tier.price_cents
    old_price_id = tier.stripe_price_id
    for key, value in tier_data.items():
        setattr(tier, key, value)

    if tier.price_cents != old_price_cents:
        if tier.is_free:
            tier.stripe_price_id = ""
        else:
            _register_stripe_price(tier.event, tier)
        if old_price_id and old_price_id != tier.stripe_price_id:
            _archive_stripe_price(old_price_id)

    tier.save()
    logger.info("ticket_tier_updated", tier_id=str(tier.id), fields=sorted(tier_data))
    return tier


@transaction.atomic
def delete_tier(tier: TicketTier) -> None:
    """Delete a tier that has never sold a seat, whoever is asking."""
    tier = TicketTier.objects.select_for_update().get(pk=tier.pk)
    if tier.quantity_sold > 0:
        raise HttpError(400, "Cannot delete a tier that has sold tickets.")
    if tier.tickets.exists():
        raise HttpError(400, "Cannot delete a tier that still has tickets.")
    price_id = tier.stripe_price_id
    tier_id = str(tier.pk)
    tier.delete()
    transaction.on_commit(lambda: _archive_stripe_price(price_id))
    logger.info("ticket_tier_deleted", tier_id=tier_id)


@transaction.atomic
def reorder_tiers(event: Event, tier_ids: list[UUID]) -> None:
    """Set ``sort_order`` from the position of each tier in ``tier_ids``."""
    tiers = {tier.pk: tier for tier in TicketTier.objects.filter(event=event, pk__in=tier_ids)}
    if len(tiers) != len(set(tier_ids)):
        raise HttpError(400, "Tier not found for this event.")
    for position, tier_id in enumerate(tier_ids):
        TicketTier.objects.filter(pk=tier_id).update(sort_order=position)
