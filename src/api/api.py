from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as SchemaValidationError
from ninja_extra import NinjaExtraAPI
from ninja_extra.exceptions import APIException
from ninja_jwt.controller import NinjaJWTDefaultController

from common.controllers import SiteSettingsController
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers.event_admin import EVENT_ADMIN_CONTROLLERS
from events.controllers.public import PublicEventController
from events.controllers.stripe_webhook import StripeWebhookController
from events.exceptions import ReservationRejectedError
from notifications.controllers.delivery_webhooks import DeliveryWebhookController

from .exception_handlers import (
    handle_api_exception,
    handle_authentication_error,
    handle_django_validation_error,
    handle_general_exception,
    handle_http_error,
    handle_not_found,
    handle_reservation_rejected_error,
    handle_schema_validation_error,
)

api = NinjaExtraAPI(
    title="Guestlist API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"{settings.SITE_NAME} API {settings.VERSION}",
    app_name=f"guestlist-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SITE_NAME},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version."""
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, ResponseOk()


api.register_controllers(
    # Auth controllers
    NinjaJWTDefaultController,
    # Guest-facing controllers
    PublicEventController,
    # Organizer controllers
    *EVENT_ADMIN_CONTROLLERS,
    SiteSettingsController,
    # Provider webhooks
    StripeWebhookController,
    DeliveryWebhookController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    SchemaValidationError: handle_schema_validation_error,
    HttpError: handle_http_error,
    Http404: handle_not_found,
    AuthenticationError: handle_authentication_error,
    APIException: handle_api_exception,
    ReservationRejectedError: handle_reservation_rejected_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
