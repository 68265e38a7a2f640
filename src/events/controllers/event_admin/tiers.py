from uuid import UUID

from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from common.schema import ActionResponse
from common.throttling import WriteThrottle
from events import models, schema
from events.controllers.base import TeamController
from events.controllers.permissions import IsTeamAdmin, IsTeamMember
from events.service import tier_service


@api_controller(
    "/event-admin/{event_id}",
    auth=ContextJWTAuth(),
    permissions=[IsTeamMember],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminTiersController(TeamController):
    """Ticket tier management."""

    @route.get("/ticket-tiers", url_name="list_ticket_tiers", response=ActionResponse[list[schema.TicketTierSchema]])
    def list_ticket_tiers(self, event_id: UUID) -> dict[str, object]:
        event = self.get_event(event_id)
        return {"data": list(models.TicketTier.objects.for_event(event.id))}

    @route.post(
        "/ticket-tiers",
        url_name="create_ticket_tier",
        response=ActionResponse[schema.TicketTierSchema],
        permissions=[IsTeamAdmin],
    )
    def create_ticket_tier(self, event_id: UUID, payload: schema.TicketTierCreateSchema) -> dict[str, object]:
        """Create a tier. Paid tiers get a Stripe price registered."""
        event = self.get_event(event_id)
        return {"data": tier_service.create_tier(event, payload.model_dump(exclude_unset=True))}

    @route.put(
        "/ticket-tiers/{uuid:tier_id}",
        url_name="update_ticket_tier",
        response=ActionResponse[schema.TicketTierSchema],
        permissions=[IsTeamAdmin],
    )
    def update_ticket_tier(
        self, event_id: UUID, tier_id: UUID, payload: schema.TicketTierEditSchema
    ) -> dict[str, object]:
        event = self.get_event(event_id)
        tier = get_object_or_404(models.TicketTier, pk=tier_id, event=event)
        return {"data": tier_service.update_tier(tier, payload.model_dump(exclude_unset=True))}

    @route.delete(
        "/ticket-tiers/{uuid:tier_id}",
        url_name="delete_ticket_tier",
        response=ActionResponse[None],
        permissions=[IsTeamAdmin],
    )
    def delete_ticket_tier(self, event_id: UUID, tier_id: UUID) -> dict[str, object]:
        """Delete a tier. Tiers that ever sold a seat cannot be deleted."""
        event = self.get_event(event_id)
        tier = get_object_or_404(models.TicketTier, pk=tier_id, event=event)
        tier_service.delete_tier(tier)
        return {}

    @route.patch(
        "/ticket-tiers/reorder",
        url_name="reorder_ticket_tiers",
        response=ActionResponse[None],
        permissions=[IsTeamAdmin],
    )
    def reorder_ticket_tiers(self, event_id: UUID, payload: schema.ReorderSchema) -> dict[str, object]:
        tier_service.reorder_tiers(self.get_event(event_id), payload.tier_ids)
        return {}
