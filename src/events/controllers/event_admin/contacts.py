from uuid import UUID

from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from common.schema import ActionResponse
from common.throttling import WriteThrottle
from events import models, schema
from events.controllers.base import TeamController
from events.controllers.permissions import IsTeamAdmin
from events.service import contact_service


@api_controller(
    "/event-admin/{event_id}",
    auth=ContextJWTAuth(),
    permissions=[IsTeamAdmin],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminContactsController(TeamController):
    """Guest list management."""

    def get_contact(self, event_id: UUID, contact_id: UUID) -> models.Contact:
        return get_object_or_404(models.Contact, pk=contact_id, event_id=event_id)

    @route.get("/contacts", url_name="list_contacts", response=ActionResponse[list[schema.ContactSchema]])
    def list_contacts(self, event_id: UUID) -> dict[str, object]:
        return {"data": list(models.Contact.objects.filter(event=self.get_event(event_id)))}

    @route.post("/contacts", url_name="create_contact", response=ActionResponse[schema.ContactSchema])
    def create_contact(self, event_id: UUID, payload: schema.ContactEditSchema) -> dict[str, object]:
        event = self.get_event(event_id)
        return {"data": contact_service.create_contact(event, payload.model_dump())}

    @route.put("/contacts/{uuid:contact_id}", url_name="update_contact", response=ActionResponse[schema.ContactSchema])
    def update_contact(self, event_id: UUID, contact_id: UUID, payload: schema.ContactEditSchema) -> dict[str, object]:
        contact = self.get_contact(event_id, contact_id)
        data = payload.model_dump()
        data["email"] = data["email"] or ""
        data["phone"] = data["phone"] or ""
        return {"data": contact_service.update_contact(contact, data)}

    @route.patch(
        "/contacts/{uuid:contact_id}/channel",
        url_name="update_contact_channel",
        response=ActionResponse[schema.ContactSchema],
    )
    def update_contact_channel(
        self, event_id: UUID, contact_id: UUID, payload: schema.ContactChannelSchema
    ) -> dict[str, object]:
        contact = self.get_contact(event_id, contact_id)
        return {"data": contact_service.update_contact_channel(contact, payload.invitation_channel)}

    @route.delete("/contacts/{uuid:contact_id}", url_name="delete_contact", response=ActionResponse[None])
    def delete_contact(self, event_id: UUID, contact_id: UUID) -> dict[str, object]:
        """Delete a contact. Tickets issued to them are kept."""
        contact_service.delete_contact(self.get_contact(event_id, contact_id))
        return {}

    @route.post(
        "/contacts/import", url_name="import_contacts", response=ActionResponse[schema.ContactImportResultSchema]
    )
    def import_contacts(self, event_id: UUID, payload: schema.ContactImportSchema) -> dict[str, object]:
        """Import rows parsed from a CSV file.

        Rows that duplicate an existing contact, or an earlier row, are skipped and reported.
        """
        result = contact_service.import_contacts(
            self.get_event(event_id),
            [row.model_dump() for row in payload.rows],
            filename=payload.filename,
            imported_by=self.user(),
            default_channel=payload.default_channel,
        )
        return {"data": result}
