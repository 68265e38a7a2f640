import structlog
from django.conf import settings
from django.http import HttpRequest
from ninja.errors import HttpError
from ninja_extra import ControllerBase, api_controller, route

from common.schema import WebhookAckSchema
from common.throttling import WebhookThrottle
from notifications.service import delivery_status
from notifications.service.delivery_status import MalformedReceiptError, WebhookVerificationError

logger = structlog.get_logger(__name__)


@api_controller("/webhooks", auth=None, tags=["Webhooks"], throttle=WebhookThrottle())
class DeliveryWebhookController(ControllerBase):
    """Delivery receipts from Resend (email) and Twilio (SMS)."""

    @route.post("/resend", url_name="resend_webhook", response={200: WebhookAckSchema})
    def resend(self, request: HttpRequest) -> tuple[int, dict[str, bool]]:
        try:
            payload = delivery_status.verify_resend_payload(request.body, request.headers)
        except WebhookVerificationError as e:
            logger.warning("resend_webhook_signature_invalid", error=str(e))
            raise HttpError(401, "Invalid signature.") from e
        except MalformedReceiptError as e:
            raise HttpError(400, str(e)) from e

        delivery_status.apply_resend_event(payload)
        return 200, {"received": True}

    @route.post("/twilio", url_name="twilio_webhook", response={200: WebhookAckSchema})
    def twilio(self, request: HttpRequest) -> tuple[int, dict[str, bool]]:
        """Twilio signs the exact callback URL it was given, so that URL is used when configured."""
        url = settings.TWILIO_STATUS_CALLBACK_URL or request.build_absolute_uri()
        params = request.POST.dict()
        signature = request.headers.get("X-Twilio-Signature", "")
        if not delivery_status.verify_twilio_request(url, params, signature):
            logger.warning("twilio_webhook_signature_invalid")
            raise HttpError(401, "Invalid signature.")

        delivery_status.apply_twilio_status(params)
        return 200, {"received": True}
