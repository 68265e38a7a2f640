"""Event schemas."""

import typing as t
from uuid import UUID

from ninja import Schema
from pydantic import AwareDatetime, Field, model_validator

from common.schema import OneToTwoFiftyFiveString, StrippedString
from events.models import Event, TicketTier


class FaqItemSchema(Schema):
    question: StrippedString = Field(..., min_length=1, max_length=500)
    answer: StrippedString = Field(..., min_length=1, max_length=2000)


class EventEditSchema(Schema):
    title: OneToTwoFiftyFiveString | None = None
    event_type: Event.EventType | None = None
    description: StrippedString | None = None
    date_start: AwareDatetime | None = None
    date_end: AwareDatetime | None = None
    location_name: StrippedString | None = None
    location_address: StrippedString | None = None
    capacity: int | None = Field(None, ge=1, description="Venue capacity (null = unlimited)")
    cover_image_url: StrippedString | None = None
    host_bio: StrippedString | None = None
    faq: list[FaqItemSchema] | None = None
    publish: bool | None = Field(None, description="Publish (true) or move back to draft (false).")

    @model_validator(mode="after")
    def check_dates(self) -> t.Self:
        if self.date_start and self.date_end and self.date_end <= self.date_start:
            raise ValueError("End date must be after start date")
        return self


class EventCreateSchema(EventEditSchema):
    title: OneToTwoFiftyFiveString
    event_type: Event.EventType = Event.EventType.OTHER
    date_start: AwareDatetime
    date_end: AwareDatetime
    publish: bool = False


class EventSchema(Schema):
    id: UUID
    title: str
    slug: str
    event_type: Event.EventType
    description: str
    date_start: AwareDatetime
    date_end: AwareDatetime
    location_name: str
    location_address: str
    capacity: int | None = None
    cover_image_url: str
    host_bio: str
    faq: list[dict[str, str]]
    status: Event.Status
    link_active: bool
    archived_at: AwareDatetime | None = None
    created_at: AwareDatetime | None = None


class EventStatsSchema(Schema):
    tickets_sold: int
    checked_in: int
    revenue_cents: int
    contacts: int
    invited: int


class PublicTierSchema(Schema):
    id: UUID
    name: str
    description: str
    price_cents: int
    max_per_contact: int | None = None
    remaining: int
    is_free: bool


class PublicEventSchema(Schema):
    id: UUID
    title: str
    slug: str
    event_type: Event.EventType
    description: str
    date_start: AwareDatetime
    date_end: AwareDatetime
    location_name: str
    location_address: str
    cover_image_url: str
    host_bio: str
    faq: list[dict[str, str]]
    tiers: list[PublicTierSchema]

    @staticmethod
    def resolve_tiers(obj: Event) -> list[TicketTier]:
        return list(TicketTier.objects.for_event(obj.id))
