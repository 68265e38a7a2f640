"""Email channel backed by Resend."""

import resend
import structlog
from django.conf import settings

from common.models import SiteSettings

from .base import SendResult

logger = structlog.get_logger(__name__)


def to_safe_email_address(email: str, site_settings: SiteSettings | None = None) -> str:
    """Convert an email address to a safe format for sending.

    Unless live emails are enabled, the recipient is folded into a plus-address of the internal
    catchall so nothing leaves the team's mailbox.
    """
    site_settings = site_settings or SiteSettings.get_solo()
    if site_settings.live_emails:
        return email
    safe_email = email.replace("@", "_at_").replace(".", "_dot_")
    user, domain = site_settings.internal_catchall_email.split("@", 1)
    return f"{user}+{safe_email}@{domain}"


class EmailChannel:
    def send(self, *, to: str, subject: str, text_body: str, html_body: str | None = None) -> SendResult:
        """Send a single email.

        Provider errors are never raised. They come back as a failed ``SendResult`` so
        fan-out callers can record the attempt and move on.
        """
        recipient = to_safe_email_address(to)
        if settings.MESSAGING_DRY_RUN:
            logger.info("email_dry_run", subject=subject)
            return SendResult(success=True, provider_message_id="dry-run")

        resend.api_key = settings.RESEND_API_KEY
        params: resend.Emails.SendParams = {
            "from": settings.DEFAULT_FROM_EMAIL,
            "to": [recipient],
            "subject": subject,
            "text": text_body,
        }
        if html_body:
            params["html"] = html_body

        try:
            response = resend.Emails.send(params)
        except Exception as e:
            logger.error("email_send_failed", subject=subject, error=str(e))
            return SendResult(success=False, error=str(e))

        message_id = str(response["id"])
        logger.info("email_sent", subject=subject, provider_message_id=message_id)
        return SendResult(success=True, provider_message_id=message_id)
