"""
Contextual logging for MDB_LITE.

Every facade call runs inside ``operation_context()``, so records logged
while it is active carry the operation, database and collection names.
A caller-supplied correlation ID is attached to the same records.

Usage:
    from mdb_lite.observability import get_logger, set_correlation_id

    set_correlation_id(request_id)
    client.read_one("app", "users", {"name": "ada"})  # records carry request_id
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_operation_fields: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "operation_fields", default={}
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set a correlation ID in the current context.

    Args:
        correlation_id: Optional correlation ID (generates new one if None)

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear the correlation ID from context."""
    _correlation_id.set(None)


@contextmanager
def operation_context(
    operation: str, database: str | None = None, collection: str | None = None
) -> Iterator[dict[str, Any]]:
    """
    Bind operation fields to log records for the duration of the block.

    Nested blocks see the outer fields overlaid with their own; the outer
    fields are restored on exit.

    Yields:
        The fields in effect inside the block
    """
    fields = {**_operation_fields.get(), "operation": operation}
    if database is not None:
        fields["database"] = database
    if collection is not None:
        fields["collection"] = collection

    token = _operation_fields.set(fields)
    try:
        yield fields
    finally:
        _operation_fields.reset(token)


def get_logging_context() -> dict[str, Any]:
    """Timestamp, correlation ID and the active operation fields."""
    context: dict[str, Any] = {"timestamp": datetime.now().isoformat()}

    correlation_id = get_correlation_id()
    if correlation_id:
        context["correlation_id"] = correlation_id

    context.update(_operation_fields.get())
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that automatically adds context to log records.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = get_logging_context()
        context.update(kwargs.get("extra") or {})
        kwargs["extra"] = context
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Get a logger whose records carry the current logging context."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.DEBUG,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log the outcome of an operation.

    Args:
        logger: Logger instance
        operation: Operation name
        level: Log level
        success: Whether operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Additional fields for the record
    """
    log_context = get_logging_context()
    log_context.update({"operation": operation, "success": success})
    if duration_ms is not None:
        log_context["duration_ms"] = round(duration_ms, 2)
    log_context.update(context)

    message = f"Operation: {operation}" if success else f"Operation failed: {operation}"
    if duration_ms is not None:
        message += f" (duration: {duration_ms:.2f}ms)"

    logger.log(level, message, extra=log_context)
