"""
Contextual logging for noodle_persistence.

Two context variables travel with each task: a correlation ID tying together
the log lines of one request, and the persistence context (collection,
region, operation) of the work in progress. ContextualLoggerAdapter copies
both into every record's ``extra``.

Usage:
    logger = get_logger(__name__)

    with persistence_context(collection="menu", operation="analyse"):
        logger.info("Running ingredient analysis")
"""

import contextlib
import contextvars
import logging
import uuid
from collections.abc import Iterator
from datetime import datetime
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_persistence_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "persistence_context", default=None
)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set the correlation ID of the current task; a UUID4 is generated when
    none is given.

    Returns:
        The correlation ID in effect
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def set_persistence_context(**kwargs: Any) -> None:
    """Replace the persistence context (collection, region, operation...)."""
    _persistence_context.set(dict(kwargs))


def clear_persistence_context() -> None:
    _persistence_context.set(None)


@contextlib.contextmanager
def persistence_context(**kwargs: Any) -> Iterator[dict[str, Any]]:
    """
    Extend the persistence context for the duration of a block, restoring
    the previous context on exit.
    """
    merged = {**(_persistence_context.get() or {}), **kwargs}
    token = _persistence_context.set(merged)
    try:
        yield merged
    finally:
        _persistence_context.reset(token)


def get_logging_context() -> dict[str, Any]:
    """
    Fields added to every contextual log record: a timestamp, the correlation
    ID when set, and the persistence context.
    """
    context: dict[str, Any] = {"timestamp": datetime.now().isoformat()}

    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id

    context.update(_persistence_context.get() or {})
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """
    Merges the logging context into ``extra``; explicit ``extra`` keys win.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Contextual logger for a module (pass ``__name__``)."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log a persistence operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g. "menu.create_item")
        level: Log level
        success: Whether the operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Fields describing the operation (key, item_name, order_id...)
    """
    extra = get_logging_context()
    extra.update(operation=operation, success=success, **context)

    message = f"{operation} {'succeeded' if success else 'failed'}"
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
        message += f" in {duration_ms:.2f}ms"

    logger.log(level, message, extra=extra)
