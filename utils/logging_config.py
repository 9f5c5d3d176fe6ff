"""Structured logging setup.

Console rendering for local work, JSON lines when LOG_FORMAT=json. Secrets
(passwords, tokens, verification codes) are redacted before rendering.
"""
import logging
import sys

import structlog
from structlog.types import EventDict

REDACTED_FIELDS = {"password", "password_hash", "code", "code_hash", "token", "secret", "cookie"}


def redact_sensitive_fields(logger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in list(event_dict.keys()):
        if key in ("event", "level", "timestamp", "logger"):
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(s in lowered for s in ("password", "token", "secret")):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            redact_sensitive_fields,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
