"""
Contextual logging for MDB_GATEWAY.

Two context variables follow a call across ``await`` points:

- a correlation ID, set once per request or job by the application
- the gateway operation in flight, set by ``operation_scope``

``get_logger`` returns an adapter that copies both onto every record, so
``collection`` and ``operation`` can be filtered on without parsing
messages.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


@dataclass(frozen=True)
class OperationScope:
    """The gateway operation currently running in this context."""

    operation: str
    collection: str | None = None


_current_scope: contextvars.ContextVar[OperationScope | None] = contextvars.ContextVar(
    "gateway_operation_scope", default=None
)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Bind a correlation ID to the current context.

    A random UUID is generated when none is given. Returns the ID bound.
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


@contextmanager
def operation_scope(operation: str, collection: str | None = None) -> Iterator[OperationScope]:
    """
    Mark a gateway operation as running for the duration of the block.

    Scopes nest: leaving the block restores whatever scope was active
    before it.
    """
    scope = OperationScope(operation, collection)
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)


def current_scope() -> OperationScope | None:
    return _current_scope.get()


def get_logging_context() -> dict[str, Any]:
    """Fields every contextual record carries (only those that are set)."""
    context: dict[str, Any] = {}
    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id
    scope = _current_scope.get()
    if scope is not None:
        context.update({k: v for k, v in asdict(scope).items() if v is not None})
    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Adds the correlation ID and operation scope to each record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Contextual counterpart of ``logging.getLogger``."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    duration_ms: float,
    error: BaseException | None = None,
    cause: BaseException | None = None,
    **fields: Any,
) -> None:
    """
    Log how a gateway operation ended.

    Successes go out at DEBUG. Failures go out at ERROR with the error's
    traceback attached.

    Args:
        logger: Logger to emit on
        operation: Gateway operation name
        duration_ms: Time spent, in milliseconds
        error: The failure, if the operation failed
        cause: Exception whose traceback to attach, if not ``error`` itself
        **fields: Extra structured fields (collection, filter, ...)
    """
    extra = {
        **get_logging_context(),
        **fields,
        "operation": operation,
        "success": error is None,
        "duration_ms": round(duration_ms, 2),
    }
    if error is None:
        logger.debug(f"{operation} completed in {duration_ms:.2f}ms", extra=extra)
    else:
        logger.error(
            f"{operation} failed after {duration_ms:.2f}ms: {error}",
            extra=extra,
            exc_info=cause or error,
        )
