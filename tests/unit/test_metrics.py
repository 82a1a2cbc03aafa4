"""
Unit tests for MetricsCollector.

Tests metrics collection functionality including:
- Thread-safety under concurrent access
- Bounded storage with LRU eviction
- Failure and timeout accounting for gateway operations
"""

import threading

import pytest

from mdb_gateway.observability.metrics import (MetricsCollector,
                                               OperationMetrics,
                                               get_metrics_collector,
                                               record_operation)


def operations(collector, prefix=None):
    return collector.snapshot(prefix)["operations"]


@pytest.mark.unit
class TestMetricsCollectorThreadSafety:
    """Test thread-safety of metrics collection."""

    def test_concurrent_record(self):
        """Concurrent samples from many threads are all counted."""
        collector = MetricsCollector()
        num_threads = 10
        samples_per_thread = 100
        barrier = threading.Barrier(num_threads)

        def record_samples(thread_id: int):
            barrier.wait()
            for i in range(samples_per_thread):
                collector.record("gateway.insert_one", 10.0 + i, collection=f"c{thread_id}")

        threads = [threading.Thread(target=record_samples, args=(i,)) for i in range(num_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert collector.count("gateway.insert_one") == num_threads * samples_per_thread


@pytest.mark.unit
class TestMetricsCollectorBoundedStorage:
    """Test bounded storage and LRU eviction."""

    def test_max_keys_limit(self):
        collector = MetricsCollector(max_keys=5)

        for i in range(8):
            collector.record(f"test.op_{i}", 10.0)

        assert len(operations(collector)) == 5

    def test_lru_eviction_order(self):
        """The key sampled least recently is evicted first."""
        collector = MetricsCollector(max_keys=3)
        collector.record("test.op_0", 10.0)
        collector.record("test.op_1", 10.0)
        collector.record("test.op_2", 10.0)

        # Sampling again makes op_0 most recently used
        collector.record("test.op_0", 10.0)
        collector.record("test.op_3", 10.0)

        assert set(operations(collector)) == {"test.op_0", "test.op_2", "test.op_3"}

    def test_no_eviction_on_update(self):
        collector = MetricsCollector(max_keys=2)
        collector.record("test.op_0", 10.0)
        collector.record("test.op_1", 10.0)
        collector.record("test.op_0", 20.0)

        ops = operations(collector)
        assert len(ops) == 2
        assert ops["test.op_0"]["count"] == 2


@pytest.mark.unit
class TestMetricsCollectorFunctionality:
    """Test basic metrics collection functionality."""

    def test_record(self):
        collector = MetricsCollector()
        collector.record("gateway.find_one", 100.0)

        entry = operations(collector)["gateway.find_one"]
        assert entry["count"] == 1
        assert entry["mean_ms"] == 100.0
        assert entry["collection"] is None

    def test_keyed_by_collection(self):
        collector = MetricsCollector()
        collector.record("gateway.find_many", 50.0, collection="users")
        collector.record("gateway.find_many", 70.0, collection="orders")

        ops = operations(collector)
        assert ops["gateway.find_many[users]"]["mean_ms"] == 50.0
        assert ops["gateway.find_many[orders]"]["collection"] == "orders"

    def test_failures_and_timeouts(self):
        collector = MetricsCollector()
        collector.record("gateway.delete_one", 5.0)
        collector.record("gateway.delete_one", 2000.0, success=False)
        collector.record("gateway.delete_one", 2000.0, success=False, timed_out=True)

        entry = operations(collector)["gateway.delete_one"]
        assert entry["count"] == 3
        assert entry["failures"] == 2
        assert entry["timeouts"] == 1

    def test_snapshot_prefix(self):
        collector = MetricsCollector()
        collector.record("gateway.insert_one", 10.0)
        collector.record("gateway.insert_many", 20.0)
        collector.record("connection.ping", 30.0)

        snapshot = collector.snapshot("gateway.")
        assert set(snapshot["operations"]) == {"gateway.insert_one", "gateway.insert_many"}
        assert "taken_at" in snapshot

    def test_count_across_collections(self):
        collector = MetricsCollector()
        collector.record("gateway.find_all", 10.0, collection="a")
        collector.record("gateway.find_all", 20.0, collection="b")
        collector.record("gateway.find_one", 30.0)

        assert collector.count("gateway.find_all") == 2
        assert collector.count("gateway.missing") == 0

    def test_reset(self):
        collector = MetricsCollector()
        collector.record("test.op", 10.0)
        collector.reset()
        assert operations(collector) == {}


@pytest.mark.unit
class TestOperationMetrics:
    """Test the per-key totals."""

    def test_empty(self):
        entry = OperationMetrics("gateway.ping")
        assert entry.mean_ms == 0.0
        assert entry.failure_rate == 0.0
        assert entry.as_dict()["min_ms"] == 0.0
        assert entry.as_dict()["last_at"] is None

    def test_min_max(self):
        entry = OperationMetrics("gateway.ping")
        entry.add(5.0)
        entry.add(15.0, success=False)

        data = entry.as_dict()
        assert data["min_ms"] == 5.0
        assert data["max_ms"] == 15.0
        assert data["failure_rate_percent"] == 50.0
        assert data["last_at"] is not None


@pytest.mark.unit
class TestGlobalMetricsFunctions:
    """Test the process-wide collector."""

    def test_get_metrics_collector_singleton(self):
        assert get_metrics_collector() is get_metrics_collector()

    def test_record_operation_global(self):
        record_operation("test.global", 10.0, collection="users")
        assert "test.global[users]" in operations(get_metrics_collector())
