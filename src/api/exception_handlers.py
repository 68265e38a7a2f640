"""Exception handlers for the API.

Every failure leaves the API in the same envelope as a success: ``{"success": false, "error": "..."}``.
"""

import typing as t

import structlog
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as SchemaValidationError
from ninja.responses import Response
from ninja_extra.exceptions import APIException

from events.exceptions import ReservationRejectedError

logger = structlog.get_logger(__name__)


def _error(status: int, message: str, **extra: t.Any) -> Response:
    return Response(status=status, data={"success": False, "error": message, **extra})


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Log the unexpected error with its traceback and hide the details from the caller."""
    logger.exception("internal_server_error", method=request.method, path=request.path)
    return _error(500, "Internal Server Error.")


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a model validation error raised by ``full_clean``."""
    logger.warning("validation_error", path=request.path, error=str(exc))
    if hasattr(exc, "error_dict"):
        errors = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
        first = next(iter(errors.values()))[0]
        return _error(400, first, errors=errors)
    return _error(400, exc.messages[0])


def handle_schema_validation_error(
    request: HttpRequest, exc: SchemaValidationError | t.Type[SchemaValidationError]
) -> Response:
    """Handle a request payload that failed schema validation."""
    errors = t.cast(SchemaValidationError, exc).errors
    message = str(errors[0].get("msg", "Invalid request.")) if errors else "Invalid request."
    return _error(400, message.removeprefix("Value error, "), errors=errors)


def handle_http_error(request: HttpRequest, exc: HttpError | t.Type[HttpError]) -> Response:
    exc = t.cast(HttpError, exc)
    return _error(exc.status_code, str(exc))


def handle_reservation_rejected_error(
    request: HttpRequest, exc: ReservationRejectedError | t.Type[ReservationRejectedError]
) -> Response:
    """Handle a reservation that broke a capacity or cap rule. The reason code lets clients branch."""
    exc = t.cast(ReservationRejectedError, exc)
    logger.info("reservation_rejected", path=request.path, reason=str(exc.reason))
    return _error(400, exc.message, reason=str(exc.reason))


def handle_api_exception(request: HttpRequest, exc: APIException | t.Type[APIException]) -> Response:
    """Handle ninja-extra errors: permission denied, throttling and invalid tokens."""
    exc = t.cast(APIException, exc)
    detail = exc.detail
    if isinstance(detail, dict):
        detail = detail.get("detail", detail)
    return _error(exc.status_code, str(detail))


def handle_authentication_error(
    request: HttpRequest, exc: AuthenticationError | t.Type[AuthenticationError]
) -> Response:
    return _error(401, "Authentication required.")


def handle_not_found(request: HttpRequest, exc: Http404 | t.Type[Http404]) -> Response:
    return _error(404, "Not found.")
