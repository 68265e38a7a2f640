import typing as t

import structlog
from django.http import HttpRequest
from ninja_jwt.authentication import JWTAuth


class ContextJWTAuth(JWTAuth):
    """JWT authentication that binds the authenticated user to the log context.

    The request middleware runs before ninja resolves the bearer token, so the user id is only
    known here. Binding it to the structlog contextvars makes every log event emitted while the
    request is handled carry ``user_id``.

    Usage:
        @api_controller("/events", auth=ContextJWTAuth())
        class EventController(ControllerBase):
            ...
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Authenticate the request and bind the user id to the log context.

        Raises:
            AuthenticationFailed: If authentication fails
            InvalidToken: If the token is invalid
        """
        user = super().authenticate(request, token)
        if user is not None:
            structlog.contextvars.bind_contextvars(user_id=str(user.pk))
        return user
