"""
In-process operation metrics for MDB_GATEWAY.

Each gateway call adds one sample under ``(operation, collection)``:
its duration, whether it failed, and whether the failure was an elapsed
deadline. The collector is bounded; the key sampled least recently is
dropped first.
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Any

MetricKey = tuple[str, str | None]


@dataclass
class OperationMetrics:
    """Running totals for one ``(operation, collection)`` key."""

    operation: str
    collection: str | None = None
    count: int = 0
    failures: int = 0
    timeouts: int = 0
    total_ms: float = 0.0
    min_ms: float | None = None
    max_ms: float = 0.0
    last_at: datetime | None = None

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    @property
    def failure_rate(self) -> float:
        """Share of failed samples, in percent."""
        return 100.0 * self.failures / self.count if self.count else 0.0

    def add(self, duration_ms: float, success: bool = True, timed_out: bool = False) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = duration_ms if self.min_ms is None else min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)
        self.failures += not success
        self.timeouts += timed_out
        self.last_at = datetime.now()

    def as_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "collection": self.collection,
            "count": self.count,
            "failures": self.failures,
            "timeouts": self.timeouts,
            "failure_rate_percent": round(self.failure_rate, 2),
            "mean_ms": round(self.mean_ms, 2),
            "min_ms": round(self.min_ms or 0.0, 2),
            "max_ms": round(self.max_ms, 2),
            "last_at": self.last_at.isoformat() if self.last_at else None,
        }


def _label(key: MetricKey) -> str:
    operation, collection = key
    return f"{operation}[{collection}]" if collection else operation


class MetricsCollector:
    """
    Thread-safe, bounded store of ``OperationMetrics``.

    Example:
        collector = MetricsCollector(max_keys=100)
        collector.record("gateway.find_one", 3.2, collection="users")
        collector.snapshot("gateway.")["operations"]["gateway.find_one[users]"]["count"]  # 1
    """

    def __init__(self, max_keys: int = 1000):
        self._max_keys = max_keys
        self._entries: OrderedDict[MetricKey, OperationMetrics] = OrderedDict()
        self._lock = threading.Lock()

    def record(
        self,
        operation: str,
        duration_ms: float,
        success: bool = True,
        timed_out: bool = False,
        collection: str | None = None,
    ) -> None:
        key = (operation, collection)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                while len(self._entries) >= self._max_keys:
                    self._entries.popitem(last=False)
                entry = self._entries[key] = OperationMetrics(operation, collection)
            else:
                self._entries.move_to_end(key)
            entry.add(duration_ms, success, timed_out)

    def snapshot(self, prefix: str | None = None) -> dict[str, Any]:
        """
        Copy the current totals.

        Args:
            prefix: Only include operations whose name starts with it

        Returns:
            ``{"taken_at": ..., "operations": {label: totals}}`` where the
            label is ``operation`` or ``operation[collection]``
        """
        with self._lock:
            operations = {
                _label(key): entry.as_dict()
                for key, entry in self._entries.items()
                if prefix is None or key[0].startswith(prefix)
            }
        return {"taken_at": datetime.now().isoformat(), "operations": operations}

    def count(self, operation: str) -> int:
        """Total samples for an operation across all collections."""
        with self._lock:
            return sum(e.count for (op, _), e in self._entries.items() if op == operation)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()


_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """The collector gateway operations record into."""
    return _collector


def record_operation(
    operation: str,
    duration_ms: float,
    success: bool = True,
    timed_out: bool = False,
    collection: str | None = None,
) -> None:
    """Record one sample in the process-wide collector."""
    _collector.record(operation, duration_ms, success, timed_out, collection)
