"""
Structured logging configuration.

Uses structlog for machine-readable, context-rich logging.
Console output in development, JSON elsewhere. Every event passes through
redact_secrets so that passwords and verifiers never reach a log sink,
whatever a caller binds.
"""

import logging
import sys
from typing import Any, MutableMapping

import structlog
from structlog.types import Processor

from core.config import settings


# Event keys whose values are replaced before rendering
SENSITIVE_KEYS = frozenset({
    "password",
    "new_password",
    "secret",
    "temporary_password",
    "credential_verifier",
})

REDACTED = "[redacted]"


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking SENSITIVE_KEYS."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def configure_logging() -> None:
    """
    Configure structlog for the current environment.

    Safe to call more than once (application startup, scripts).
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if settings.is_development:
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Driver chatter drowns out account events at INFO
    for noisy in ("pymongo", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))


def bind_request_context(**context: Any) -> None:
    """Attach context (request path, session id) to every event of this request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally bound to initial context.

    Usage:
        logger = get_logger(__name__, account_id="user_1700000000000_ab12cd34e")
        logger.info("Purchase recorded", purchase_type="premium_yearly")
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
