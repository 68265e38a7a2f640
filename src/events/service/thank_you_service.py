import typing as t
from dataclasses import dataclass, field

import structlog
from ninja.errors import HttpError

from events.models import Contact, Event, InvitationLog, Ticket
from notifications.service import messages
from notifications.service.channels import EmailChannel, SmsChannel

from .invitation_service import record_attempt

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Recipient:
    name: str
    channel: InvitationLog.Channel
    address: str
    contact: Contact | None = None

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""


@dataclass
class ThankYouPreview:
    recipients: list[Recipient]
    email_count: int
    sms_count: int
    already_sent: bool


@dataclass
class ThankYouResult:
    sent: int = 0
    failed: int = 0
    failed_details: list[str] = field(default_factory=list)


def _recipient_for_contact(contact: Contact) -> Recipient | None:
    if contact.invitation_channel == Contact.Channel.NONE:
        return None
    # "both" gets email only so nobody is thanked twice
    if contact.invitation_channel == Contact.Channel.SMS:
        channel, address = InvitationLog.Channel.SMS, contact.phone
    else:
        channel, address = InvitationLog.Channel.EMAIL, contact.email
    if not address:
        return None
    return Recipient(name=contact.full_name or "Guest", channel=channel, address=address, contact=contact)


def thank_you_recipients(event: Event) -> list[Recipient]:
    """Attendees to thank, one entry per contact or, for tickets without a contact, per address."""
    tickets = Ticket.objects.attended().filter(event=event).select_related("contact").order_by("created_at")
    seen: dict[str, Recipient] = {}
    for ticket in tickets:
        if ticket.contact is not None:
            key = f"contact:{ticket.contact_id}"
            recipient = None if key in seen else _recipient_for_contact(ticket.contact)
        elif ticket.attendee_email:
            key = f"email:{ticket.attendee_email.lower()}"
            recipient = Recipient(ticket.attendee_name, InvitationLog.Channel.EMAIL, ticket.attendee_email)
        elif ticket.attendee_phone:
            key = f"phone:{ticket.attendee_phone}"
            recipient = Recipient(ticket.attendee_name, InvitationLog.Channel.SMS, ticket.attendee_phone)
        else:
            continue
        if recipient is not None and key not in seen:
            seen[key] = recipient
    return list(seen.values())


def _already_sent(event: Event) -> bool:
    return InvitationLog.objects.filter(event=event, message_type=InvitationLog.MessageType.THANK_YOU).exists()


def _assert_ended(event: Event) -> None:
    if not event.has_ended:
        raise HttpError(400, "Event has not ended yet.")


def preview_thank_you(event: Event) -> ThankYouPreview:
    _assert_ended(event)
    recipients = thank_you_recipients(event)
    return ThankYouPreview(
        recipients=recipients,
        email_count=sum(1 for r in recipients if r.channel == InvitationLog.Channel.EMAIL),
        sms_count=sum(1 for r in recipients if r.channel == InvitationLog.Channel.SMS),
        already_sent=_already_sent(event),
    )


def send_thank_you(
    event: Event,
    email_body: str,
    force: bool = False,
    *,
    email_channel: EmailChannel | None = None,
    sms_channel: SmsChannel | None = None,
) -> ThankYouResult:
    """Thank every attendee of a finished event.

    A second run needs ``force``: thank-you messages are not meant to go out twice by accident.
    """
    _assert_ended(event)
    if not force and _already_sent(event):
        raise HttpError(400, 'Thank-you messages have already been sent. Use "Send Again" to resend.')

    email_channel = email_channel or EmailChannel()
    sms_channel = sms_channel or SmsChannel()
    outcome = ThankYouResult()
    sms_body = messages.thank_you_sms(event)

    for recipient in thank_you_recipients(event):
        if recipient.channel == InvitationLog.Channel.EMAIL:
            content = messages.thank_you_email(event, recipient.first_name, email_body)
            result = email_channel.send(
                to=recipient.address,
                subject=content.subject,
                text_body=content.text_body,
                html_body=content.html_body,
            )
        else:
            result = sms_channel.send(to=recipient.address, body=sms_body)

        record_attempt(
            event,
            recipient.contact,
            message_type=InvitationLog.MessageType.THANK_YOU,
            channel=recipient.channel,
            recipient=recipient.address,
            result=result,
        )
        if result.success:
            outcome.sent += 1
        else:
            outcome.failed += 1
            outcome.failed_details.append(f"{recipient.name} ({recipient.channel}): {result.error}")

    logger.info("thank_you_sent", event_id=str(event.id), sent=outcome.sent, failed=outcome.failed, forced=force)
    return outcome
