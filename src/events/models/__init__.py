from .contact import Contact, CsvImport
from .event import Event
from .invitation import InvitationLog
from .ticket import Ticket, TicketTier, generate_ticket_code

__all__ = [
    "Contact",
    "CsvImport",
    "Event",
    "InvitationLog",
    "Ticket",
    "TicketTier",
    "generate_ticket_code",
]
