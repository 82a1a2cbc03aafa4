"""
Deadline enforcement and error normalization for gateway operations.

Every store call goes through ``run_operation``: it bounds the call with
the operation's deadline, records metrics, logs the outcome and converts
driver failures into the gateway error taxonomy.
"""

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from bson.errors import BSONError
from pymongo.errors import (
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

from ..exceptions import GatewayError
from ..observability import log_operation, operation_scope, record_operation
from .addressing import CollectionTarget

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Driver errors that mean a time limit, not a rejection
DRIVER_TIMEOUT_ERRORS = (
    ExecutionTimeout,
    NetworkTimeout,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

# Driver errors a gateway operation normalizes
STORE_ERRORS = (PyMongoError, BSONError)

ErrorFactory = Callable[[str, bool, BaseException], GatewayError]
"""Builds the family error from (reason, timed_out, cause)."""


def is_timeout(error: BaseException) -> bool:
    """Return True if an exception means a deadline or time limit elapsed."""
    return isinstance(error, (asyncio.TimeoutError, *DRIVER_TIMEOUT_ERRORS))


def server_time_limit_ms(deadline: float) -> int:
    """
    Convert a deadline in seconds to a ``max_time_ms`` value.

    Rounds up to whole milliseconds (after discarding float noise below a
    microsecond) and never returns 0, which the server reads as "no limit".
    """
    return max(1, math.ceil(round(deadline * 1000, 3)))


async def run_operation(
    operation: str,
    target: CollectionTarget,
    call: Callable[[], Awaitable[T]],
    on_error: ErrorFactory,
    timeout: float | None = None,
    **log_context: Any,
) -> T:
    """
    Run one store call under its deadline.

    Args:
        operation: Gateway operation name (also the deadline key)
        target: Resolved collection the call operates on
        call: Zero-argument coroutine factory performing the driver call
        on_error: Builds the error to raise on failure
        timeout: Optional deadline override in seconds
        **log_context: Extra fields attached to log records

    Returns:
        Whatever ``call`` returns

    Raises:
        GatewayError: The error built by ``on_error`` when the call fails or
                      the deadline elapses
    """
    deadline = target.deadline_for(operation, timeout)
    metric_name = f"gateway.{operation}"
    with operation_scope(operation, target.name):
        start_time = time.time()
        try:
            result = await asyncio.wait_for(call(), timeout=deadline)
        except (asyncio.TimeoutError, *STORE_ERRORS) as e:
            duration_ms = (time.time() - start_time) * 1000
            if isinstance(e, asyncio.TimeoutError):
                reason, timed_out = f"deadline of {deadline}s exceeded", True
            else:
                reason, timed_out = str(e), is_timeout(e)
            record_operation(
                metric_name,
                duration_ms,
                success=False,
                timed_out=timed_out,
                collection=target.name,
            )
            error = on_error(reason, timed_out, e)
            log_operation(
                logger,
                operation,
                duration_ms,
                error=error,
                cause=e,
                error_type=type(e).__name__,
                timed_out=timed_out,
                **log_context,
            )
            raise error from e

        duration_ms = (time.time() - start_time) * 1000
        record_operation(metric_name, duration_ms, success=True, collection=target.name)
        log_operation(logger, operation, duration_ms, **log_context)
        return result
