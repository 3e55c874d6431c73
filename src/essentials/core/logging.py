"""
Structured logging for essentials.

Every module logs through ``get_logger(__name__)`` and emits dotted event
names with keyword fields, e.g. ``logger.info("runner.finished", status="ok")``.

Loggers are structlog ``BoundLogger`` wrappers around standard-library
loggers, so the library stays silent until the host application configures
``logging`` (the ``essentials`` logger carries a ``NullHandler``). Applications
that want essentials' own rendering call ``configure_logging``.

Configuration Flow:
    ::

        configure_logging(level="INFO", json_format=None, service="essentials")
            ↓
        structlog processor chain:
          1. filter_by_level
          2. TimeStamper (iso)
          3. add_log_level
          4. add_service_metadata
          5. elasticsearch_compatible (JSON only)
          6. JSONRenderer (or ConsoleRenderer for a tty)
            ↓
        root handler → stdout

Examples:
    >>> from essentials.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.debug("runner.step.completed", step="double")

    Scoped context (bound to every event emitted inside the block):

    >>> with LogContext(run_id="abc123"):
    ...     logger.info("runner.started")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict, Processor, WrappedLogger

    from essentials.core.settings import EssentialsSettings


HANDLER_NAME = "essentials"

_SERVICE_NAME = "essentials"

logging.getLogger("essentials").addHandler(logging.NullHandler())


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Make field names Elasticsearch/ECS compatible."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def _install_handler(log_level: int) -> None:
    """Route stdlib records to stdout, replacing a handler from an earlier call."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(log_level)


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "essentials",
    add_timestamp: bool = True,
) -> None:
    """Opt in to essentials' structured rendering.

    Meant to be called once by an application; libraries embedding
    essentials should leave logging to their host.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    log_level = getattr(logging, level.upper())

    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        processors.insert(1, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(_elasticsearch_compatible)
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _install_handler(log_level)


def configure_from_settings(settings: EssentialsSettings | None = None) -> None:
    """Configure logging from ``EssentialsSettings`` (environment by default)."""
    from essentials.core.settings import get_settings

    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service_name,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger backed by ``logging.getLogger(name)``.

    The processor chain is resolved lazily from the structlog configuration,
    so loggers created at import time pick up a later ``configure_logging``.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(run_id="abc123")
        logger.info("runner.step.completed")  # Includes run_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    On exit every key goes back to the value it had on entry, so nested
    blocks binding the same key (a runner started from another runner's
    step) leave the outer value in place.

    Example:
        with LogContext(run_id="abc123"):
            logger.info("runner.started")
        # Previous run_id (if any) restored here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs
        self._tokens: Any = None

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self._context)
        return self

    def __exit__(self, *args) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
