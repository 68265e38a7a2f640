from uuid import UUID

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from ninja import Query
from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from common.schema import ActionResponse
from common.throttling import WriteThrottle
from events import models, schema
from events.controllers.base import TeamController
from events.controllers.permissions import IsTeamAdmin, IsTeamMember
from events.service import attendee_service


@api_controller(
    "/event-admin/{event_id}",
    auth=ContextJWTAuth(),
    permissions=[IsTeamMember],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminAttendeesController(TeamController):
    """Door operations. Open to helpers."""

    @route.get("/attendees", url_name="list_attendees", response=ActionResponse[list[schema.TicketSchema]])
    def list_attendees(self, event_id: UUID, filters: Query[schema.AttendeeFilterSchema]) -> dict[str, object]:
        event = self.get_event(event_id)
        return {"data": list(attendee_service.list_attendees(event, status=filters.status, search=filters.search))}

    @route.post("/walk-ins", url_name="create_walk_in", response=ActionResponse[schema.TicketSchema])
    def create_walk_in(self, event_id: UUID, payload: schema.WalkInRequestSchema) -> dict[str, object]:
        """Issue a confirmed ticket at the door, on any tier, as long as seats remain."""
        event = self.get_event(event_id)
        ticket = attendee_service.create_walk_in(
            event,
            payload.tier_id,
            attendee_name=payload.attendee_name,
            attendee_email=str(payload.attendee_email or ""),
            attendee_phone=payload.attendee_phone,
            quantity=payload.quantity,
            issued_by=self.user(),
        )
        return {"data": ticket}

    @route.post(
        "/tickets/{uuid:ticket_id}/check-in", url_name="toggle_check_in", response=ActionResponse[schema.TicketSchema]
    )
    def toggle_check_in(self, event_id: UUID, ticket_id: UUID) -> dict[str, object]:
        event = self.get_event(event_id)
        ticket = get_object_or_404(models.Ticket, pk=ticket_id, event=event)
        return {"data": attendee_service.toggle_check_in(ticket)}

    @route.get("/tickets/lookup", url_name="lookup_ticket", response=ActionResponse[schema.TicketSchema])
    def lookup_ticket(self, event_id: UUID, params: Query[schema.TicketLookupSchema]) -> dict[str, object]:
        """Find a ticket by the code printed on it."""
        return {"data": attendee_service.lookup_ticket(self.get_event(event_id), params.code)}

    @route.get("/attendees/export", url_name="export_attendees", permissions=[IsTeamAdmin])
    def export_attendees(self, event_id: UUID):  # type: ignore[no-untyped-def]
        """Download the guest list as CSV."""
        event = self.get_event(event_id)
        response = HttpResponse(attendee_service.export_attendees_csv(event), content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{attendee_service.export_filename(event)}"'
        return response
