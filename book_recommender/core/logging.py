"""
Book Recommender - Structured Logging

Log events carry the service identity from Settings plus whatever request
context the API layer bound for the current call (selector, match mode,
corpus size). The pipeline modules only ever call get_logger().

Patterns Applied:
- One-time configure_logging() at startup
- Request context via structlog.contextvars, merged into every event

Anti-Patterns Avoided:
- structlog.configure() called per get_logger() - PREVENTED via _configured flag
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

_configured: bool = False


def service_info_processor(service_name: str, environment: str) -> Processor:
    """Build a processor stamping the service identity on every event.

    Values bound explicitly on an event are left alone.
    """

    def add_service_info(
        logger: logging.Logger,  # noqa: ARG001 - Required by structlog interface
        method_name: str,  # noqa: ARG001 - Required by structlog interface
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_info


def configure_logging(
    service_name: str = "book-recommender",
    log_level: str = "INFO",
    json_output: bool = True,
    environment: str = "development",
) -> None:
    """Configure structlog for the service.

    Call once at startup with values from Settings. Later calls are ignored
    until reset_logging().

    Args:
        service_name: Value of the ``service`` field on every event
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, coloured console output otherwise
        environment: Value of the ``environment`` field on every event
    """
    global _configured

    if _configured:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        service_info_processor(service_name, environment),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
    ]

    # Loggers are not cached so structlog.testing.capture_logs() sees
    # module-level loggers that already emitted events.
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)


def bind_request_context(**values: Any) -> None:
    """Replace the request context merged into every event of this call.

    None values are skipped; everything else is stringified so ids of either
    type render the same.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        **{key: str(value) for key, value in values.items() if value is not None}
    )


def clear_request_context() -> None:
    """Drop the request context bound by bind_request_context()."""
    structlog.contextvars.clear_contextvars()


def reset_logging() -> None:
    """Reset logging configuration for testing."""
    global _configured
    _configured = False
    structlog.reset_defaults()
