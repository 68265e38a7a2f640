from uuid import UUID

from ninja_extra import ControllerBase, api_controller, route

from common.schema import ActionResponse
from common.throttling import AnonDefaultThrottle, CheckoutThrottle
from events import schema
from events.service import checkout_service, event_service, rsvp_service


@api_controller("/public", auth=None, tags=["Public"], throttle=AnonDefaultThrottle())
class PublicEventController(ControllerBase):
    """Guest-facing endpoints reachable through an event's public link."""

    @route.get("/events/{slug}", url_name="get_public_event", response=ActionResponse[schema.PublicEventSchema])
    def get_event(self, slug: str) -> dict[str, object]:
        """Event page with the tiers on sale and the seats left on each."""
        return {"data": event_service.get_public_event_by_slug(slug)}

    @route.post(
        "/events/{uuid:event_id}/checkout",
        url_name="create_checkout",
        response=ActionResponse[schema.CheckoutResponseSchema],
        throttle=CheckoutThrottle(),
    )
    def checkout(self, event_id: UUID, payload: schema.CheckoutRequestSchema) -> dict[str, object]:
        """Start a paid purchase and return the hosted Stripe checkout URL to redirect to.

        The ticket stays pending until Stripe reports the payment.
        """
        result = checkout_service.create_checkout(
            event_id=event_id,
            tier_id=payload.tier_id,
            attendee_name=payload.attendee_name,
            attendee_email=str(payload.attendee_email),
            attendee_phone=payload.attendee_phone,
            quantity=payload.quantity,
        )
        return {"data": {"checkout_url": result.checkout_url, "ticket_id": result.ticket.id}}

    @route.post(
        "/events/{uuid:event_id}/rsvp",
        url_name="create_rsvp",
        response=ActionResponse[schema.TicketIdSchema],
        throttle=CheckoutThrottle(),
    )
    def rsvp(self, event_id: UUID, payload: schema.RsvpRequestSchema) -> dict[str, object]:
        """Reserve seats on a free tier. The ticket is confirmed immediately."""
        ticket = rsvp_service.create_rsvp(
            event_id=event_id,
            tier_id=payload.tier_id,
            attendee_name=payload.attendee_name,
            attendee_email=str(payload.attendee_email or ""),
            attendee_phone=payload.attendee_phone,
            quantity=payload.quantity,
        )
        return {"data": {"ticket_id": ticket.id}}

    @route.get(
        "/tickets/{uuid:ticket_id}", url_name="get_public_ticket", response=ActionResponse[schema.PublicTicketSchema]
    )
    def get_ticket(self, ticket_id: UUID) -> dict[str, object]:
        return {"data": event_service.get_public_ticket(ticket_id)}
