"""Contact and messaging schemas."""

import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import EmailStr, Field, model_validator

from common.schema import StrippedString
from events.models import Contact
from events.service.invitation_service import InvitationScope


class ContactSchema(ModelSchema):
    class Meta:
        model = Contact
        fields = [
            "id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "invitation_channel",
            "invited_at",
            "csv_source",
            "imported_at",
        ]


class ContactEditSchema(Schema):
    first_name: StrippedString = Field("", max_length=200)
    last_name: StrippedString = Field("", max_length=200)
    email: EmailStr | t.Literal[""] | None = None
    phone: StrippedString | None = Field(None, max_length=30)
    invitation_channel: Contact.Channel = Contact.Channel.NONE

    @model_validator(mode="after")
    def require_identifier(self) -> t.Self:
        if not (self.email or self.phone):
            raise ValueError("At least one of email or phone is required")
        return self


class ContactChannelSchema(Schema):
    invitation_channel: Contact.Channel


class CsvRowSchema(Schema):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    invitation_channel: str | None = None


class ContactImportSchema(Schema):
    filename: StrippedString = Field(..., min_length=1, max_length=255)
    rows: list[CsvRowSchema]
    default_channel: Contact.Channel = Contact.Channel.BOTH


class SkippedRowSchema(Schema):
    row: int
    reason: str


class ContactImportResultSchema(Schema):
    import_id: UUID
    total_rows: int
    imported: int
    skipped: int
    skipped_details: list[SkippedRowSchema]


class SendInvitationsSchema(Schema):
    scope: InvitationScope = InvitationScope.UNINVITED
    contact_ids: list[UUID] | None = None

    @model_validator(mode="after")
    def require_selection(self) -> t.Self:
        if self.scope == InvitationScope.SELECTED and not self.contact_ids:
            raise ValueError("Select at least one contact.")
        return self


class FanOutResultSchema(Schema):
    sent: int
    failed: int
    skipped: int


class ThankYouRecipientSchema(Schema):
    name: str
    channel: str
    address: str
    contact_id: UUID | None = None

    @staticmethod
    def resolve_contact_id(obj: t.Any) -> UUID | None:
        return obj.contact.id if obj.contact is not None else None


class ThankYouPreviewSchema(Schema):
    recipients: list[ThankYouRecipientSchema]
    email_count: int
    sms_count: int
    already_sent: bool


class SendThankYouSchema(Schema):
    email_body: StrippedString = Field(..., min_length=1, max_length=5000)
    force: bool = False


class ThankYouResultSchema(Schema):
    sent: int
    failed: int
    failed_details: list[str]
