from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from common.schema import ActionResponse
from common.throttling import WriteThrottle
from events import schema
from events.controllers.base import TeamController
from events.controllers.permissions import IsTeamAdmin
from events.service import invitation_service, thank_you_service


@api_controller(
    "/event-admin/{event_id}",
    auth=ContextJWTAuth(),
    permissions=[IsTeamAdmin],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminMessagingController(TeamController):
    """Invitations before the event and thank-you messages after it."""

    @route.post("/invitations", url_name="send_invitations", response=ActionResponse[schema.FanOutResultSchema])
    def send_invitations(self, event_id: UUID, payload: schema.SendInvitationsSchema) -> dict[str, object]:
        """Invite contacts over their preferred channels.

        Contacts without a channel are skipped. Every attempt is logged.
        """
        result = invitation_service.send_invitations(self.get_event(event_id), payload.scope, payload.contact_ids)
        return {"data": result}

    @route.get(
        "/thank-you/preview", url_name="preview_thank_you", response=ActionResponse[schema.ThankYouPreviewSchema]
    )
    def preview_thank_you(self, event_id: UUID) -> dict[str, object]:
        return {"data": thank_you_service.preview_thank_you(self.get_event(event_id))}

    @route.post("/thank-you", url_name="send_thank_you", response=ActionResponse[schema.ThankYouResultSchema])
    def send_thank_you(self, event_id: UUID, payload: schema.SendThankYouSchema) -> dict[str, object]:
        result = thank_you_service.send_thank_you(self.get_event(event_id), payload.email_body, force=payload.force)
        return {"data": result}
