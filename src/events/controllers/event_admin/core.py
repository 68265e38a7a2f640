from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from common.schema import ActionResponse
from common.throttling import WriteThrottle
from events import models, schema
from events.controllers.base import TeamController
from events.controllers.permissions import IsTeamAdmin, IsTeamMember
from events.service import event_service


@api_controller(
    "/event-admin",
    auth=ContextJWTAuth(),
    permissions=[IsTeamMember],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminCoreController(TeamController):
    """Event lifecycle: create, edit, publish, archive and delete."""

    @route.get("/events", url_name="list_events", response=ActionResponse[list[schema.EventSchema]])
    def list_events(self, status: models.Event.Status | None = None) -> dict[str, object]:
        return {"data": list(event_service.list_events(status))}

    @route.post(
        "/events", url_name="create_event", response=ActionResponse[schema.EventSchema], permissions=[IsTeamAdmin]
    )
    def create_event(self, payload: schema.EventCreateSchema) -> dict[str, object]:
        """Create an event as a draft, or published right away with ``publish``."""
        data = payload.model_dump(exclude_unset=True, exclude={"publish"})
        event = event_service.create_event(self.user(), data, publish=payload.publish)
        return {"data": event}

    @route.get("/events/{uuid:event_id}", url_name="get_event", response=ActionResponse[schema.EventSchema])
    def get_event_detail(self, event_id: UUID) -> dict[str, object]:
        return {"data": self.get_event(event_id)}

    @route.put(
        "/events/{uuid:event_id}",
        url_name="update_event",
        response=ActionResponse[schema.EventSchema],
        permissions=[IsTeamAdmin],
    )
    def update_event(self, event_id: UUID, payload: schema.EventEditSchema) -> dict[str, object]:
        event = self.get_event(event_id)
        data = payload.model_dump(exclude_unset=True, exclude={"publish"})
        event = event_service.update_event(event, data, publish=payload.publish)
        return {"data": event}

    @route.get(
        "/events/{uuid:event_id}/stats", url_name="event_stats", response=ActionResponse[schema.EventStatsSchema]
    )
    def event_stats(self, event_id: UUID) -> dict[str, object]:
        """Ticket sales, check-ins, revenue and outreach counts for the dashboard."""
        return {"data": event_service.event_stats(self.get_event(event_id))}

    @route.post(
        "/events/{uuid:event_id}/archive",
        url_name="archive_event",
        response=ActionResponse[schema.EventSchema],
        permissions=[IsTeamAdmin],
    )
    def archive_event(self, event_id: UUID) -> dict[str, object]:
        """Archive an event. The public link stops working."""
        return {"data": event_service.archive_event(self.get_event(event_id))}

    @route.post(
        "/events/{uuid:event_id}/unarchive",
        url_name="unarchive_event",
        response=ActionResponse[schema.EventSchema],
        permissions=[IsTeamAdmin],
    )
    def unarchive_event(self, event_id: UUID) -> dict[str, object]:
        return {"data": event_service.unarchive_event(self.get_event(event_id))}

    @route.delete(
        "/events/{uuid:event_id}",
        url_name="delete_event",
        response=ActionResponse[None],
        permissions=[IsTeamAdmin],
    )
    def delete_event(self, event_id: UUID) -> dict[str, object]:
        """Permanently delete an archived event together with its tickets."""
        event_service.delete_event(self.get_event(event_id))
        return {}
