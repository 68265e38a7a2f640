"""SMS channel backed by Twilio."""

import structlog
from django.conf import settings
from twilio.rest import Client

from .base import SendResult

logger = structlog.get_logger(__name__)


class SmsChannel:
    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        return self._client

    def send(self, *, to: str, body: str) -> SendResult:
        """Send a single text message. Provider errors come back as a failed result."""
        if settings.MESSAGING_DRY_RUN:
            logger.info("sms_dry_run")
            return SendResult(success=True, provider_message_id="dry-run")

        kwargs = {"to": to, "from_": settings.TWILIO_PHONE_NUMBER, "body": body}
        if settings.TWILIO_STATUS_CALLBACK_URL:
            kwargs["status_callback"] = settings.TWILIO_STATUS_CALLBACK_URL
        try:
            message = self.client.messages.create(**kwargs)
        except Exception as e:
            logger.error("sms_send_failed", error=str(e))
            return SendResult(success=False, error=str(e))

        logger.info("sms_sent", provider_message_id=message.sid)
        return SendResult(success=True, provider_message_id=str(message.sid))
