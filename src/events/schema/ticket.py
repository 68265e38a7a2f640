"""Ticket tier, checkout and attendee schemas."""

from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, EmailStr, Field

from common.schema import OneToTwoFiftyFiveString, StrippedString
from events.models import Ticket, TicketTier

PhoneString = StrippedString


class TicketTierSchema(ModelSchema):
    event_id: UUID
    remaining: int
    is_free: bool

    class Meta:
        model = TicketTier
        fields = [
            "id",
            "name",
            "description",
            "price_cents",
            "quantity_total",
            "quantity_sold",
            "max_per_contact",
            "sort_order",
            "stripe_price_id",
        ]


class TicketTierEditSchema(Schema):
    name: OneToTwoFiftyFiveString | None = None
    description: StrippedString | None = None
    price_cents: int | None = Field(None, ge=0, description="0 means free (RSVP).")
    quantity_total: int | None = Field(None, ge=1)
    max_per_contact: int | None = Field(None, ge=1, description="Null means no per-contact cap.")


class TicketTierCreateSchema(TicketTierEditSchema):
    name: OneToTwoFiftyFiveString
    price_cents: int = Field(0, ge=0, description="0 means free (RSVP).")
    quantity_total: int = Field(..., ge=1)


class ReorderSchema(Schema):
    tier_ids: list[UUID]


class _AttendeeSchema(Schema):
    tier_id: UUID
    attendee_name: OneToTwoFiftyFiveString
    attendee_phone: PhoneString = Field("", max_length=30)
    quantity: int = Field(1, ge=1)


class CheckoutRequestSchema(_AttendeeSchema):
    attendee_email: EmailStr


class CheckoutResponseSchema(Schema):
    checkout_url: str
    ticket_id: UUID


class RsvpRequestSchema(_AttendeeSchema):
    attendee_email: EmailStr | None = None


class WalkInRequestSchema(_AttendeeSchema):
    attendee_email: EmailStr | None = None


class TicketIdSchema(Schema):
    ticket_id: UUID


class TicketSchema(ModelSchema):
    tier_name: str
    event_id: UUID

    class Meta:
        model = Ticket
        fields = [
            "id",
            "attendee_name",
            "attendee_email",
            "attendee_phone",
            "ticket_code",
            "quantity",
            "status",
            "amount_paid_cents",
            "purchased_at",
            "checked_in_at",
        ]

    @staticmethod
    def resolve_tier_name(obj: Ticket) -> str:
        return obj.tier.name


class PublicTicketSchema(Schema):
    id: UUID
    ticket_code: str
    attendee_name: str
    quantity: int
    status: Ticket.Status
    tier_name: str
    event_title: str
    event_slug: str
    date_start: AwareDatetime
    location_name: str

    @staticmethod
    def resolve_tier_name(obj: Ticket) -> str:
        return obj.tier.name

    @staticmethod
    def resolve_event_title(obj: Ticket) -> str:
        return obj.event.title

    @staticmethod
    def resolve_event_slug(obj: Ticket) -> str:
        return obj.event.slug

    @staticmethod
    def resolve_date_start(obj: Ticket) -> AwareDatetime:
        return obj.event.date_start

    @staticmethod
    def resolve_location_name(obj: Ticket) -> str:
        return obj.event.location_name


class AttendeeFilterSchema(Schema):
    status: Ticket.Status | None = None
    search: StrippedString | None = None


class TicketLookupSchema(Schema):
    code: OneToTwoFiftyFiveString