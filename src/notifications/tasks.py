"""Celery tasks for guest-facing messages."""

import structlog
from celery import shared_task

from events.models import Ticket
from notifications.service import messages
from notifications.service.channels import EmailChannel

logger = structlog.get_logger(__name__)


@shared_task
def send_rsvp_confirmation(ticket_id: str) -> bool:
    """Email the attendee a confirmation of their free reservation.

    Best effort: the reservation already stands, so a failure is logged and never retried or raised.
    """
    ticket = Ticket.objects.select_related("event", "tier").filter(pk=ticket_id).first()
    if ticket is None:
        logger.warning("rsvp_confirmation_ticket_missing", ticket_id=ticket_id)
        return False
    if not ticket.attendee_email:
        logger.info("rsvp_confirmation_skipped_no_email", ticket_id=ticket_id)
        return False

    content = messages.rsvp_confirmation_email(ticket)
    result = EmailChannel().send(
        to=ticket.attendee_email,
        subject=content.subject,
        text_body=content.text_body,
        html_body=content.html_body,
    )
    if not result.success:
        logger.warning("rsvp_confirmation_failed", ticket_id=ticket_id, error=result.error)
        return False

    logger.info("rsvp_confirmation_sent", ticket_id=ticket_id, provider_message_id=result.provider_message_id)
    return True
