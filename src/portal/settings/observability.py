"""Observability settings for the portal.

Defines, for `configure_logging()` to install:
- Structlog (structured logging with JSON output)
- Stdlib logging, routed through structlog's ProcessorFormatter
"""

import logging.config
import re
import typing as t

import structlog
from decouple import config

from .base import DEBUG, LOG_LEVEL, SERVICE_NAME, VERSION

SERVICE_VERSION = VERSION
DEPLOYMENT_ENVIRONMENT = config("DEPLOYMENT_ENVIRONMENT", default="development" if DEBUG else "production")


# Structlog configuration
def scrub_pii(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    """Scrub PII from log events.

    Redacts credentials and masks e-mail addresses. User ids coming from the
    identity provider are frequently e-mail addresses, so they are masked too.
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
                d[key] = re.sub(r"\b[\w\.-]+@[\w\.-]+\.\w+\b", "[EMAIL]", d[key])

        return t.cast(dict[str, t.Any], d)

    return _scrub_dict(event_dict)


def add_app_context(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    """Add application-level context to all log events."""
    event_dict["service"] = SERVICE_NAME
    event_dict["version"] = SERVICE_VERSION
    event_dict["environment"] = DEPLOYMENT_ENVIRONMENT
    return event_dict


# Structlog processors for direct use
STRUCTLOG_PROCESSORS = [
    structlog.contextvars.merge_contextvars,  # Merge context variables
    structlog.stdlib.add_logger_name,  # Add logger name
    structlog.stdlib.add_log_level,  # Add log level
    structlog.stdlib.PositionalArgumentsFormatter(),  # Format positional args
    structlog.processors.TimeStamper(fmt="iso"),  # Add ISO timestamp
    structlog.processors.StackInfoRenderer(),  # Render stack info
    structlog.processors.format_exc_info,  # Format exceptions
    structlog.processors.UnicodeDecoder(),  # Decode unicode
    add_app_context,  # Add service/version/environment
    scrub_pii,  # Scrub PII before serialization
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,  # Rendered as JSON by the "json" formatter
]

# Processors for foreign (stdlib) loggers
FOREIGN_PRE_CHAIN = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    add_app_context,
    scrub_pii,
]

LOGGING: dict[str, t.Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": FOREIGN_PRE_CHAIN,
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
        # Reduce noise from the event loop
        "asyncio": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def configure_logging() -> None:
    """Install the structlog and stdlib logging configuration.

    Called once by the application entry point. Importing the settings does not touch logging.
    """
    structlog.configure(
        processors=STRUCTLOG_PROCESSORS,  # type: ignore[arg-type]
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(LOGGING)
