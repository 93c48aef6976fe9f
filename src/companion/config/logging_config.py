"""
Companion Logging Configuration

structlog over the stdlib logging module. Console rendering in
development, one JSON object per line everywhere else.

Every entry carries the service name and version. Request correlation
and session IDs are bound through contextvars so that logs emitted
deep inside the engine can be joined back to the HTTP request.

PRIVACY: Conversations are sensitive. Callers log lengths, tiers,
categories and identifiers only. Keys that could still carry free text
or self-reported scores are masked by the redaction processor.
"""

import logging
import sys
from typing import Any

import structlog

from companion import __version__
from companion.config.settings import Settings


SERVICE_NAME: str = "companion-engine"

# Key fragments whose values never reach a log sink
REDACTED_KEY_FRAGMENTS: frozenset[str] = frozenset({
    "user_text",
    "raw_text",
    "display_name",
    "check_in",
    "emotional_baseline",
    "matched_phrase",
})

REDACTED: str = "[REDACTED]"

# Libraries that log every request at INFO
QUIET_LOGGERS: tuple[str, ...] = ("uvicorn", "uvicorn.access", "httpx")


def _is_redacted_key(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in REDACTED_KEY_FRAGMENTS)


def _mask(key: str, value: Any) -> Any:
    if _is_redacted_key(key):
        return REDACTED
    if isinstance(value, dict):
        return {k: _mask(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_mask(key, item) for item in value]
    return value


def redact_conversation_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Mask values of keys that may hold conversation content.

    Nested dictionaries are scanned too. The event message itself
    is left alone (it is always a fixed string).
    """
    return {
        key: value if key == "event" else _mask(key, value)
        for key, value in event_dict.items()
    }


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def build_processors(settings: Settings) -> list[Any]:
    """
    Processor chain for the given environment.

    Args:
        settings: Application settings

    Returns:
        structlog processors ending in a renderer
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        redact_conversation_data,
        add_service_context,
    ]

    if settings.env == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=settings.debug))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return processors


def configure_logging(settings: Settings) -> None:
    """
    Configure structlog and the root logger.

    Called by the application factory; safe to call again (tests build
    several applications in one process).
    """
    level = logging.getLevelName(settings.log_level.upper())

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; pass __name__."""
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str) -> None:
    """Attach the request correlation ID to every entry in this context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def bind_session_id(session_id: str) -> None:
    """Attach the session ID to every entry in this context."""
    structlog.contextvars.bind_contextvars(session_id=session_id)


def clear_context() -> None:
    """Drop all bound context (end of request)."""
    structlog.contextvars.clear_contextvars()
