"""Composition of the outbound messages sent to guests.

Email bodies are rendered from ``notifications/email/{name}.{txt,html}``.
"""

from dataclasses import dataclass
from typing import Any

from django.template.loader import render_to_string
from django.utils import dateformat, timezone

from common.models import SiteSettings
from events.models import Event, Ticket


@dataclass(frozen=True)
class EmailContent:
    subject: str
    text_body: str
    html_body: str


def event_url(event: Event, site_settings: SiteSettings | None = None) -> str:
    site_settings = site_settings or SiteSettings.get_solo()
    return f"{site_settings.frontend_base_url.rstrip('/')}/e/{event.slug}"


def format_event_date(event: Event) -> str:
    return dateformat.format(timezone.localtime(event.date_start), "l, F j, Y \\a\\t g:i A")


def _render_email(name: str, subject: str, context: dict[str, Any]) -> EmailContent:
    site_settings = SiteSettings.get_solo()
    full_context = {"venue_name": site_settings.venue_name, "subject": subject, **context}
    return EmailContent(
        subject=subject,
        text_body=render_to_string(f"notifications/email/{name}.txt", full_context),
        html_body=render_to_string(f"notifications/email/{name}.html", full_context),
    )


def invitation_email(event: Event, first_name: str) -> EmailContent:
    return _render_email(
        "invitation",
        f"You're invited to {event.title}",
        {
            "first_name": first_name or "there",
            "event_title": event.title,
            "date_formatted": format_event_date(event),
            "location_name": event.location_name,
            "event_url": event_url(event),
        },
    )


def invitation_sms(event: Event) -> str:
    return f"You're invited to {event.title} on {format_event_date(event)}! Details and tickets: {event_url(event)}"


def rsvp_confirmation_email(ticket: Ticket) -> EmailContent:
    event = ticket.event
    return _render_email(
        "rsvp_confirmation",
        f"Your RSVP for {event.title} is confirmed",
        {
            "attendee_name": ticket.attendee_name,
            "event_title": event.title,
            "date_formatted": format_event_date(event),
            "location_name": event.location_name,
            "tier_name": ticket.tier.name,
            "quantity": ticket.quantity,
            "ticket_code": ticket.ticket_code,
        },
    )


def thank_you_email(event: Event, first_name: str, custom_body: str) -> EmailContent:
    return _render_email(
        "thank_you",
        f"Thank you for attending {event.title}!",
        {
            "first_name": first_name or "Guest",
            "event_title": event.title,
            "custom_body": custom_body,
        },
    )


def thank_you_sms(event: Event) -> str:
    return f"Thank you for attending {event.title}! Hope to see you next time."
