from .contact import (
    ContactChannelSchema,
    ContactEditSchema,
    ContactImportResultSchema,
    ContactImportSchema,
    ContactSchema,
    CsvRowSchema,
    FanOutResultSchema,
    SendInvitationsSchema,
    SendThankYouSchema,
    SkippedRowSchema,
    ThankYouPreviewSchema,
    ThankYouRecipientSchema,
    ThankYouResultSchema,
)
from .event import (
    EventCreateSchema,
    EventEditSchema,
    EventSchema,
    EventStatsSchema,
    FaqItemSchema,
    PublicEventSchema,
    PublicTierSchema,
)
from .ticket import (
    AttendeeFilterSchema,
    CheckoutRequestSchema,
    CheckoutResponseSchema,
    PublicTicketSchema,
    ReorderSchema,
    RsvpRequestSchema,
    TicketIdSchema,
    TicketLookupSchema,
    TicketSchema,
    TicketTierCreateSchema,
    TicketTierEditSchema,
    TicketTierSchema,
    WalkInRequestSchema,
)

__all__ = [
    "AttendeeFilterSchema",
    "CheckoutRequestSchema",
    "CheckoutResponseSchema",
    "ContactChannelSchema",
    "ContactEditSchema",
    "ContactImportResultSchema",
    "ContactImportSchema",
    "ContactSchema",
    "CsvRowSchema",
    "EventCreateSchema",
    "EventEditSchema",
    "EventSchema",
    "EventStatsSchema",
    "FanOutResultSchema",
    "FaqItemSchema",
    "PublicEventSchema",
    "PublicTicketSchema",
    "PublicTierSchema",
    "ReorderSchema",
    "RsvpRequestSchema",
    "SendInvitationsSchema",
    "SendThankYouSchema",
    "SkippedRowSchema",
    "ThankYouPreviewSchema",
    "ThankYouRecipientSchema",
    "ThankYouResultSchema",
    "TicketIdSchema",
    "TicketLookupSchema",
    "TicketSchema",
    "TicketTierCreateSchema",
    "TicketTierEditSchema",
    "TicketTierSchema",
    "WalkInRequestSchema",
]
