"""
Structured logging configuration using structlog.

Usage:
    from apps.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("grupo_created", grupo_id=str(grupo.id), organization_id=str(org.id))

Events are snake_case names with keyword fields. Request-scoped fields bound
by RequestContextMiddleware use Datadog attribute names:
    - trace_id: request correlation id
    - usr.id / usr.email: authenticated identity
    - http.method, http.url_details.path, http.status_code
    - duration: request duration in nanoseconds
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def _rename_correlation_id(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Expose correlation_id as the string trace_id field."""
    if "correlation_id" in event_dict:
        event_dict["trace_id"] = str(event_dict.pop("correlation_id"))
    return event_dict


def _duration_ms_to_ns(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace duration_ms with duration in nanoseconds."""
    if "duration_ms" in event_dict:
        event_dict["duration"] = int(event_dict.pop("duration_ms") * 1_000_000)
    return event_dict


def configure_logging(json_format: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog on top of stdlib logging.

    Django and third-party loggers go through the same formatter.

    Args:
        json_format: JSON lines (production) or colored console output (development).
        log_level: Minimum log level to output.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _rename_correlation_id,
        _duration_ms_to_ns,
    ]

    renderer: Processor
    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically get_logger(__name__)."""
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """
    Bind fields to every log line of the current request or task.

    Dotted keys need dict unpacking: bind_contextvars(**{"usr.id": "123"}).
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    """Drop all bound fields so context does not leak between requests."""
    structlog.contextvars.clear_contextvars()
