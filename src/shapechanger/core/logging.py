"""Structured logging for the shapechanger engine.

Logging is set up once from Settings: ``log_level`` filters events and
``json_logs`` switches between console and JSON rendering. Every event
carries the application name and any context bound by the running
operation (actor id and effect source during apply and revert).

Example:
    >>> from shapechanger.core.logging import configure_logging, get_logger
    >>> configure_logging()
    >>> logger = get_logger(__name__)
    >>> logger.info("Transformation applied", actor_id="abc123", source="Beast Shape")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from shapechanger.core.config import Settings, get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


_STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class AppContext:
    """Processor stamping the application name on each event."""

    def __init__(self, app_name: str) -> None:
        self.app_name = app_name

    def __call__(
        self,
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("app", self.app_name)
        return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    settings: Settings | None = None,
    *,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Source of ``log_level``, ``json_logs`` and ``app_name``;
            the cached application settings when omitted.
        log_file: Optional path that also receives standard library records.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            AppContext(settings.app_name),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(settings.json_logs),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # sqlite3 and asyncio log through the standard library
    logging.basicConfig(format=_STDLIB_FORMAT, level=level, stream=sys.stdout, force=True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values included in every following log event.

    The apply and revert sequences bind the actor id and effect source so
    that every store call they make is traceable to one operation. The
    service clears the context when the operation ends.

    Example:
        >>> bind_context(actor_id="abc123", source="Reduce Person")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "AppContext",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
