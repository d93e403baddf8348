"""Structured Logging for Ratify

Ratify's domain loggers are structlog ``BoundLogger``s wrapping stdlib loggers
under the ``ratify`` namespace. A ``NullHandler`` is installed on ``ratify``
at import, so nothing is written until the host application decides so:
either through its own stdlib logging setup, or by calling
``configure_logging()`` which attaches a structlog ``ProcessorFormatter``
(colored console or JSON) to the ``ratify`` logger only.

Events carry rule and attribute names, never the values under validation.
"""
import logging
import sys
from typing import IO

import structlog
from structlog.types import EventDict, Processor

LIBRARY_LOGGER = "ratify"

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


def _tag_library(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("library", LIBRARY_LOGGER)
    return event_dict


def get_event_processors() -> list[Processor]:
    """Processors run for every ratify event, before it reaches stdlib logging."""
    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _tag_library,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def get_logger(name: str = LIBRARY_LOGGER) -> structlog.stdlib.BoundLogger:
    """A structured logger routed through ``logging.getLogger(name)``."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=get_event_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def configure_logging(level: str = "INFO", json_logs: bool = False, stream: IO[str] | None = None) -> logging.Handler:
    """Render ratify events to ``stream`` (stderr by default).

    Only the ``ratify`` logger is touched; calling this again replaces the
    handler installed by the previous call. Applications that already route
    stdlib logging somewhere can skip this and set the ``ratify`` level instead.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, colored console output.
        stream: Where to write; defaults to ``sys.stderr``.

    Returns:
        The installed handler.
    """
    if json_logs:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None and sys.stderr.isatty())

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))
    handler.set_name("ratify")

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers = [
        h for h in library_logger.handlers if h.get_name() != "ratify"
    ] + [handler]
    library_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    library_logger.propagate = False
    return handler


def configure_from_settings() -> logging.Handler:
    """Configure logging from RATIFY_LOG_LEVEL / RATIFY_LOG_JSON."""
    from ratify.config import get_settings

    settings = get_settings()
    return configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)


class LoggerRegistry:
    """Cache of the library's domain loggers (``ratify.<domain>``)."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"{LIBRARY_LOGGER}.{name}")
        return cls._loggers[name]


def engine_logger() -> structlog.stdlib.BoundLogger:
    """Logger for validator construction and runs."""
    return LoggerRegistry.get("engine")


def registry_logger() -> structlog.stdlib.BoundLogger:
    """Logger for rule registration events."""
    return LoggerRegistry.get("registry")
