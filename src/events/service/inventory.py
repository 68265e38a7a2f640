"""Tier inventory store.

``quantity_sold`` is only ever changed here, through a single conditional ``UPDATE`` that
refuses to move the counter outside ``[0, quantity_total]``. Callers never read the counter,
add to it and write it back.
"""

from uuid import UUID

import structlog
from django.db.models import F
from django.utils import timezone

from events.exceptions import InventoryConflictError
from events.models import TicketTier

logger = structlog.get_logger(__name__)


def adjust_quantity_sold(tier_id: UUID, delta: int) -> int:
    """Atomically add ``delta`` to a tier's sold count.

    Args:
        tier_id: The ticket tier to adjust.
        delta: Signed number of seats to add (positive) or release (negative).

    Returns:
        The new ``quantity_sold``.

    Raises:
        InventoryConflictError: If the result would be negative or exceed ``quantity_total``,
            or the tier does not exist. Nothing is written in that case.
    """
    qs = TicketTier.objects.filter(pk=tier_id)
    if delta > 0:
        qs = qs.filter(quantity_sold__lte=F("quantity_total") - delta)
    elif delta < 0:
        qs = qs.filter(quantity_sold__gte=-delta)

    updated = qs.update(quantity_sold=F("quantity_sold") + delta, updated_at=timezone.now())
    if not updated:
        logger.warning("tier_inventory_conflict", tier_id=str(tier_id), delta=delta)
        raise InventoryConflictError(tier_id, delta)

    quantity_sold: int = TicketTier.objects.values_list("quantity_sold", flat=True).get(pk=tier_id)
    logger.info("tier_inventory_adjusted", tier_id=str(tier_id), delta=delta, quantity_sold=quantity_sold)
    return quantity_sold
