"""
Observability components.

Provides contextual logging, operation metrics and health checks.
"""

from .health import (
    HealthChecker,
    HealthCheckResult,
    HealthStatus,
    check_mongodb_health,
    check_persistence_health,
    overall_status,
)
from .logging import (
    ContextualLoggerAdapter,
    clear_correlation_id,
    clear_persistence_context,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    persistence_context,
    set_correlation_id,
    set_persistence_context,
)
from .metrics import (
    MetricsCollector,
    OperationMetrics,
    get_metrics_collector,
    record_operation,
    timed_operation,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "OperationMetrics",
    "get_metrics_collector",
    "record_operation",
    "timed_operation",
    # Logging
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "set_persistence_context",
    "clear_persistence_context",
    "persistence_context",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
    # Health
    "HealthStatus",
    "HealthCheckResult",
    "HealthChecker",
    "check_mongodb_health",
    "check_persistence_health",
    "overall_status",
]
