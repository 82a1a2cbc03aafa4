"""
Health reporting for MDB_GATEWAY.

``check_store_health`` turns the advisory ``ping`` into a structured
result; ``HealthChecker`` runs a set of named checks concurrently and
folds them into one status for a status endpoint.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..core.connection import StoreHandle

logger = logging.getLogger(__name__)

HealthCheck = Callable[[], Awaitable["HealthCheckResult"]]


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


# Worst status wins when folding results
_SEVERITY = {
    HealthStatus.HEALTHY: 0,
    HealthStatus.UNKNOWN: 1,
    HealthStatus.DEGRADED: 2,
    HealthStatus.UNHEALTHY: 3,
}


@dataclass
class HealthCheckResult:
    """Outcome of one health check."""

    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return self.status is HealthStatus.HEALTHY

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "checked_at": self.checked_at.isoformat(),
        }


class HealthChecker:
    """
    Named collection of async health checks.

    Example:
        checker = HealthChecker()
        checker.register(lambda: check_store_health(store), name="mongodb")
        report = await checker.run()  # {"status": "healthy", "checks": [...], ...}
    """

    def __init__(self) -> None:
        self._checks: dict[str, HealthCheck] = {}

    def register(self, check: HealthCheck, name: str | None = None) -> None:
        """Add a check; registering a name again replaces the earlier check."""
        self._checks[name or check.__name__] = check

    async def _run_one(self, name: str, check: HealthCheck) -> HealthCheckResult:
        try:
            return await check()
        except (RuntimeError, ValueError, TypeError, AttributeError, OSError) as e:
            logger.error(f"Health check '{name}' raised: {e}", exc_info=True)
            return HealthCheckResult(name, HealthStatus.UNKNOWN, f"Check raised: {e}")

    async def run(self) -> dict[str, Any]:
        """Run every check concurrently and report the worst status."""
        results = await asyncio.gather(
            *(self._run_one(name, check) for name, check in self._checks.items())
        )
        overall = max(
            (r.status for r in results), key=_SEVERITY.__getitem__, default=HealthStatus.HEALTHY
        )
        return {
            "status": overall.value,
            "checked_at": datetime.now().isoformat(),
            "checks": [r.as_dict() for r in results],
        }


async def check_store_health(
    handle: "StoreHandle | None", timeout: float | None = None
) -> HealthCheckResult:
    """
    Report store liveness from a ping on the handle.

    Never raises: a missing or closed handle and a failed ping both yield
    ``UNHEALTHY``.
    """
    from ..core.connection import ping

    if handle is None or handle.closed:
        return HealthCheckResult("mongodb", HealthStatus.UNHEALTHY, "Store handle not connected")

    started = time.perf_counter()
    alive = await ping(handle, timeout=timeout)
    details = {
        "db_name": handle.db_name,
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
    }
    if alive:
        return HealthCheckResult("mongodb", HealthStatus.HEALTHY, "MongoDB answered ping", details)
    return HealthCheckResult("mongodb", HealthStatus.UNHEALTHY, "MongoDB ping failed", details)
