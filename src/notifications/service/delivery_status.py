"""Delivery receipts from the email and SMS providers.

Both providers report by message id. Receipts for ids we never logged are ignored.
"""

import typing as t

import structlog
from django.conf import settings
from svix.webhooks import Webhook, WebhookVerificationError
from twilio.request_validator import RequestValidator

from events.models import InvitationLog

logger = structlog.get_logger(__name__)

RESEND_STATUS_MAP = {
    "email.delivered": InvitationLog.Status.DELIVERED,
    "email.bounced": InvitationLog.Status.BOUNCED,
    "email.complained": InvitationLog.Status.BOUNCED,
}

TWILIO_STATUS_MAP = {
    "delivered": InvitationLog.Status.DELIVERED,
    "undelivered": InvitationLog.Status.FAILED,
    "failed": InvitationLog.Status.FAILED,
}


class MalformedReceiptError(Exception):
    """The provider payload is signed but does not have the expected shape."""


def update_delivery_status(provider_message_id: str, status: InvitationLog.Status) -> int:
    """Set the status of every log row sent under ``provider_message_id``. Returns the rows touched."""
    updated = InvitationLog.objects.filter(provider_message_id=provider_message_id).update(status=status)
    if updated:
        logger.info("delivery_status_updated", provider_message_id=provider_message_id, status=str(status))
    else:
        logger.info("delivery_status_unknown_message", provider_message_id=provider_message_id)
    return updated


def verify_resend_payload(body: bytes, headers: t.Mapping[str, str]) -> dict[str, t.Any]:
    """Check the svix signature of a Resend webhook and return the decoded payload.

    Raises:
        WebhookVerificationError: If the signature headers are missing or wrong.
        MalformedReceiptError: If the body is not a JSON object.
    """
    lowered = {key.lower(): value for key, value in headers.items()}
    try:
        payload = Webhook(settings.RESEND_WEBHOOK_SECRET).verify(body, lowered)
    except ValueError as e:
        raise MalformedReceiptError("Invalid JSON body.") from e
    if not isinstance(payload, dict):
        raise MalformedReceiptError("Invalid JSON body.")
    return payload


def apply_resend_event(payload: dict[str, t.Any]) -> int:
    """Apply a Resend receipt. Signed receipts without the fields we need are logged and dropped."""
    event_type = payload.get("type")
    data = payload.get("data")
    if not isinstance(event_type, str) or not isinstance(data, dict):
        logger.warning("resend_webhook_incomplete_receipt", missing="type_or_data")
        return 0

    status = RESEND_STATUS_MAP.get(event_type)
    if status is None:
        logger.info("resend_webhook_ignored", event_type=event_type)
        return 0
    email_id = data.get("email_id")
    if not email_id:
        logger.warning("resend_webhook_incomplete_receipt", event_type=event_type, missing="email_id")
        return 0
    return update_delivery_status(str(email_id), status)


def verify_twilio_request(url: str, params: t.Mapping[str, str], signature: str) -> bool:
    if not signature:
        return False
    return bool(RequestValidator(settings.TWILIO_AUTH_TOKEN).validate(url, dict(params), signature))


def apply_twilio_status(params: t.Mapping[str, str]) -> int:
    message_sid = params.get("MessageSid")
    message_status = params.get("MessageStatus")
    if not message_sid or not message_status:
        logger.warning("twilio_webhook_incomplete_receipt", message_sid=message_sid or "")
        return 0

    status = TWILIO_STATUS_MAP.get(message_status)
    if status is None:
        return 0
    return update_delivery_status(message_sid, status)


__all__ = [
    "MalformedReceiptError",
    "WebhookVerificationError",
    "apply_resend_event",
    "apply_twilio_status",
    "update_delivery_status",
    "verify_resend_payload",
    "verify_twilio_request",
]
