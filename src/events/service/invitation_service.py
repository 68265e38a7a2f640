import enum
import typing as t
from dataclasses import dataclass
from uuid import UUID

import structlog
from django.utils import timezone

from events.models import Contact, Event, InvitationLog
from notifications.service import messages
from notifications.service.channels import EmailChannel, SendResult, SmsChannel

logger = structlog.get_logger(__name__)


class InvitationScope(enum.StrEnum):
    ALL = "all"
    UNINVITED = "uninvited"
    SELECTED = "selected"


@dataclass
class FanOutResult:
    sent: int = 0
    failed: int = 0
    skipped: int = 0


def record_attempt(
    event: Event,
    contact: Contact | None,
    *,
    message_type: InvitationLog.MessageType,
    channel: InvitationLog.Channel,
    recipient: str,
    result: SendResult,
) -> InvitationLog:
    """Append the audit row for one outbound message."""
    return InvitationLog.objects.create(
        event=event,
        contact=contact,
        message_type=message_type,
        channel=channel,
        recipient=recipient,
        status=InvitationLog.Status.SENT if result.success else InvitationLog.Status.FAILED,
        provider_message_id=result.provider_message_id or "",
        error=result.error or "",
    )


def _target_contacts(event: Event, scope: InvitationScope, contact_ids: t.Iterable[UUID] | None) -> t.Any:
    qs = Contact.objects.filter(event=event)
    if scope == InvitationScope.UNINVITED:
        qs = qs.uninvited()
    elif scope == InvitationScope.SELECTED:
        qs = qs.filter(pk__in=list(contact_ids or []))
    return qs


def send_invitations(
    event: Event,
    scope: InvitationScope = InvitationScope.UNINVITED,
    contact_ids: t.Iterable[UUID] | None = None,
    *,
    email_channel: EmailChannel | None = None,
    sms_channel: SmsChannel | None = None,
) -> FanOutResult:
    """Send invitations to the contacts in ``scope`` over each contact's channel.

    Every attempt is logged. A contact counts as invited once at least one message went out.
    """
    email_channel = email_channel or EmailChannel()
    sms_channel = sms_channel or SmsChannel()
    outcome = FanOutResult()

    for contact in _target_contacts(event, scope, contact_ids):
        if not (contact.wants_email or contact.wants_sms):
            outcome.skipped += 1
            continue

        delivered = False
        if contact.wants_email:
            content = messages.invitation_email(event, contact.first_name)
            result = email_channel.send(
                to=contact.email,
                subject=content.subject,
                text_body=content.text_body,
                html_body=content.html_body,
            )
            record_attempt(
                event,
                contact,
                message_type=InvitationLog.MessageType.INVITATION,
                channel=InvitationLog.Channel.EMAIL,
                recipient=contact.email,
                result=result,
            )
            delivered |= result.success
            outcome.sent += int(result.success)
            outcome.failed += int(not result.success)

        if contact.wants_sms:
            result = sms_channel.send(to=contact.phone, body=messages.invitation_sms(event))
            record_attempt(
                event,
                contact,
                message_type=InvitationLog.MessageType.INVITATION,
                channel=InvitationLog.Channel.SMS,
                recipient=contact.phone,
                result=result,
            )
            delivered |= result.success
            outcome.sent += int(result.success)
            outcome.failed += int(not result.success)

        if delivered:
            contact.invited_at = timezone.now()
            contact.save(update_fields=["invited_at", "updated_at"])

    logger.info(
        "invitations_sent",
        event_id=str(event.id),
        scope=str(scope),
        sent=outcome.sent,
        failed=outcome.failed,
        skipped=outcome.skipped,
    )
    return outcome
