"""
Observability components.

Provides contextual logging, operation metrics and store health checks.
"""

from .health import HealthChecker, HealthCheckResult, HealthStatus, check_store_health
from .logging import (
    ContextualLoggerAdapter,
    OperationScope,
    clear_correlation_id,
    current_scope,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    operation_scope,
    set_correlation_id,
)
from .metrics import (
    MetricsCollector,
    OperationMetrics,
    get_metrics_collector,
    record_operation,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "OperationMetrics",
    "get_metrics_collector",
    "record_operation",
    # Logging
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "OperationScope",
    "operation_scope",
    "current_scope",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
    # Health
    "HealthStatus",
    "HealthCheckResult",
    "HealthChecker",
    "check_store_health",
]
