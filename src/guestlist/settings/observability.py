"""Logging settings for Guestlist.

Configures structlog for structured JSON logging. Both structlog loggers and foreign loggers
(Django, Celery, the Stripe SDK) are rendered through the same processor chain.
"""

import re
import typing as t

import structlog
from decouple import config

from .base import DEBUG, VERSION

SERVICE_NAME = config("SERVICE_NAME", default="guestlist")
SERVICE_VERSION = VERSION
DEPLOYMENT_ENVIRONMENT = config("DEPLOYMENT_ENVIRONMENT", default="development" if DEBUG else "production")
LOG_LEVEL = config("LOG_LEVEL", default="INFO")


def scrub_pii(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    """Scrub PII from log events.

    Redacts secrets and signatures, and masks email addresses that leak into free-text fields.
    """
    sensitive_keys = [
        "password",
        "secret",
        "api_key",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "cookie",
        "signature",
    ]

    def _scrub_dict(d: t.Any) -> dict[str, t.Any]:
        if not isinstance(d, dict):
            return t.cast(dict[str, t.Any], d)

        for key in list(d.keys()):
            if any(sensitive in key.lower() for sensitive in sensitive_keys):
                d[key] = "[REDACTED]"
            elif isinstance(d[key], dict):
                d[key] = _scrub_dict(d[key])
            elif isinstance(d[key], str):
                # Only scrub emails from non-email fields
                if "email" not in key.lower():
                    d[key] = re.sub(r"\b[\w\.-]+@[\w\.-]+\.\w+\b", "[EMAIL]", d[key])

        return t.cast(dict[str, t.Any], d)

    return _scrub_dict(event_dict)


def add_app_context(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    """Add application-level context to all log events."""
    event_dict["service"] = SERVICE_NAME
    event_dict["version"] = SERVICE_VERSION
    event_dict["environment"] = DEPLOYMENT_ENVIRONMENT
    return event_dict


SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
    add_app_context,
    scrub_pii,
]

structlog.configure(
    processors=[*SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],  # type: ignore[list-item]
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processors": [
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            "foreign_pre_chain": SHARED_PROCESSORS,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "django.db.backends": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
        "celery": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "stripe": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
