"""
Operation metrics for noodle_persistence.

Repository, region and connection operations record their duration and
outcome here. Each measurement is filed under the operation name plus the
tags of the store it ran against (``collection=menu``,
``region=YummyNoodleOrder``), so latency and error rates can be compared per
collection while ``get_summary()`` still folds them per operation.
"""

import functools
import inspect
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pymongo.errors import PyMongoError

from ..exceptions import NoodlePersistenceError

logger = logging.getLogger(__name__)

# Failures that mark an operation as unsuccessful before being re-raised
_OPERATION_FAILURES = (
    NoodlePersistenceError,
    PyMongoError,
    ValueError,
    TypeError,
    LookupError,
    OSError,
    TimeoutError,
)


@dataclass
class OperationMetrics:
    """Running totals for one operation (and one tag set)."""

    operation_name: str
    count: int = 0
    error_count: int = 0
    total_duration_ms: float = 0.0
    min_duration_ms: float | None = None
    max_duration_ms: float = 0.0
    last_execution: datetime | None = None

    @property
    def avg_duration_ms(self) -> float:
        return self.total_duration_ms / self.count if self.count else 0.0

    @property
    def error_rate(self) -> float:
        """Failed executions as a percentage."""
        return self.error_count * 100 / self.count if self.count else 0.0

    def record(self, duration_ms: float, success: bool = True) -> None:
        self.count += 1
        self.error_count += 0 if success else 1
        self.total_duration_ms += duration_ms
        if self.min_duration_ms is None or duration_ms < self.min_duration_ms:
            self.min_duration_ms = duration_ms
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        self.last_execution = datetime.now()

    def merge(self, other: "OperationMetrics") -> None:
        """Fold another tag set of the same operation into these totals."""
        self.count += other.count
        self.error_count += other.error_count
        self.total_duration_ms += other.total_duration_ms
        if other.min_duration_ms is not None and (
            self.min_duration_ms is None or other.min_duration_ms < self.min_duration_ms
        ):
            self.min_duration_ms = other.min_duration_ms
        self.max_duration_ms = max(self.max_duration_ms, other.max_duration_ms)
        if other.last_execution and (
            self.last_execution is None or other.last_execution > self.last_execution
        ):
            self.last_execution = other.last_execution

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation_name,
            "count": self.count,
            "error_count": self.error_count,
            "error_rate_percent": round(self.error_rate, 2),
            "avg_duration_ms": round(self.avg_duration_ms, 2),
            "min_duration_ms": round(self.min_duration_ms or 0.0, 2),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "last_execution": self.last_execution.isoformat() if self.last_execution else None,
        }


def metric_key(operation_name: str, tags: dict[str, Any]) -> str:
    """``repository.save[collection=menu]``; the bare name when there are no tags."""
    if not tags:
        return operation_name
    rendered = ",".join(f"{name}={value}" for name, value in sorted(tags.items()))
    return f"{operation_name}[{rendered}]"


class MetricsCollector:
    """
    Thread-safe store of OperationMetrics keyed by ``metric_key``.

    Holds at most ``max_metrics`` keys; the least recently recorded key is
    dropped first.
    """

    def __init__(self, max_metrics: int = 10000):
        self._metrics: OrderedDict[str, OperationMetrics] = OrderedDict()
        self._lock = threading.Lock()
        self._max_metrics = max_metrics

    def record_operation(
        self, operation_name: str, duration_ms: float, success: bool = True, **tags: Any
    ) -> None:
        """
        Record one execution.

        Args:
            operation_name: Name of the operation (e.g. "repository.save")
            duration_ms: Duration in milliseconds
            success: Whether the operation succeeded
            **tags: Store the operation ran against (collection, region)
        """
        key = metric_key(operation_name, tags)

        with self._lock:
            metrics = self._metrics.pop(key, None)
            if metrics is None:
                metrics = OperationMetrics(operation_name=operation_name)
                while len(self._metrics) >= self._max_metrics:
                    self._metrics.popitem(last=False)
            self._metrics[key] = metrics
            metrics.record(duration_ms, success)

    def get_metrics(self, operation_name: str | None = None) -> dict[str, Any]:
        """
        Per-key metrics, optionally only the keys starting with operation_name.
        """
        with self._lock:
            selected = {
                key: metrics.to_dict()
                for key, metrics in self._metrics.items()
                if operation_name is None or key.startswith(operation_name)
            }
            tracked = len(self._metrics)

        return {
            "timestamp": datetime.now().isoformat(),
            "metrics": selected,
            "total_operations": tracked,
        }

    def get_summary(self) -> dict[str, Any]:
        """
        Metrics per operation name, with every tag set folded together.
        """
        with self._lock:
            folded: dict[str, OperationMetrics] = {}
            for metrics in self._metrics.values():
                name = metrics.operation_name
                folded.setdefault(name, OperationMetrics(operation_name=name)).merge(metrics)
            tracked = len(self._metrics)

        return {
            "timestamp": datetime.now().isoformat(),
            "total_operations": tracked,
            "summary": {name: metrics.to_dict() for name, metrics in folded.items()},
        }

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()

    def get_operation_count(self, operation_name: str) -> int:
        """Executions of an operation across all tag sets."""
        with self._lock:
            return sum(
                metrics.count
                for metrics in self._metrics.values()
                if metrics.operation_name == operation_name
            )


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


def record_operation(
    operation_name: str, duration_ms: float, success: bool = True, **tags: Any
) -> None:
    """Record an operation in the global metrics collector."""
    get_metrics_collector().record_operation(operation_name, duration_ms, success, **tags)


def _instance_tags(args: tuple) -> dict[str, Any]:
    # Methods of stores that expose metrics_tags are filed per collection/region
    if args:
        tags = getattr(args[0], "metrics_tags", None)
        if isinstance(tags, dict):
            return tags
    return {}


def timed_operation(operation_name: str, **tags: Any):
    """
    Decorator to time and record an operation.

    When the decorated function is a method of an object with a
    ``metrics_tags`` dict (repositories and regions), those tags are added to
    the ones given here.

    Usage:
        @timed_operation("repository.find_one")
        async def find_one(self, id):
            ...
    """

    def decorator(func: Callable) -> Callable:
        def finish(args: tuple, start_time: float, success: bool) -> None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            record_operation(
                operation_name, duration_ms, success, **{**_instance_tags(args), **tags}
            )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.perf_counter()
                success = True
                try:
                    return await func(*args, **kwargs)
                except _OPERATION_FAILURES:
                    success = False
                    raise
                finally:
                    finish(args, start_time, success)

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            success = True
            try:
                return func(*args, **kwargs)
            except _OPERATION_FAILURES:
                success = False
                raise
            finally:
                finish(args, start_time, success)

        return sync_wrapper

    return decorator
