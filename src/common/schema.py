"""Common schemas for the API."""

import typing as t

from ninja import Schema
from pydantic import StringConstraints

T = t.TypeVar("T")

StrippedString = t.Annotated[str, StringConstraints(strip_whitespace=True)]
OneToTwoFiftyFiveString = t.Annotated[str, StringConstraints(min_length=1, max_length=255, strip_whitespace=True)]


class VersionResponse(Schema):
    version: str


class ResponseOk(Schema):
    status: t.Literal["ok"] = "ok"


class ActionResponse(Schema, t.Generic[T]):
    """Envelope returned by every mutation and lookup endpoint."""

    success: bool = True
    data: T | None = None
    error: str | None = None


class SiteSettingsSchema(Schema):
    venue_name: str
    default_host_bio: str


class SiteSettingsUpdateSchema(Schema):
    venue_name: OneToTwoFiftyFiveString
    default_host_bio: StrippedString = ""


class WebhookAckSchema(Schema):
    received: bool = True
