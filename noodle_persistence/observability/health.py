"""
Health checks for noodle_persistence.

A check is an async callable returning a HealthCheckResult. HealthChecker runs
the registered checks and reports the worst status among them.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pymongo.errors import (
    ConnectionFailure,
    OperationFailure,
    ServerSelectionTimeoutError,
)

from ..exceptions import NoodlePersistenceError

logger = logging.getLogger(__name__)

HealthCheck = Callable[[], Awaitable["HealthCheckResult"]]


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


# Worst first: the overall status is the first one any check reports
_SEVERITY = (HealthStatus.UNHEALTHY, HealthStatus.DEGRADED, HealthStatus.UNKNOWN)


@dataclass
class HealthCheckResult:
    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


def overall_status(results: list[HealthCheckResult]) -> HealthStatus:
    """Worst status reported; HEALTHY only when every check is healthy."""
    if not results:
        return HealthStatus.UNKNOWN
    reported = {result.status for result in results}
    for status in _SEVERITY:
        if status in reported:
            return status
    return HealthStatus.HEALTHY


class HealthChecker:
    """
    Example:
        checker = HealthChecker()
        checker.register_check(lambda: check_mongodb_health(client))
        report = await checker.check_all()
    """

    def __init__(self):
        self._checks: list[HealthCheck] = []

    def register_check(self, check_func: HealthCheck) -> None:
        self._checks.append(check_func)

    async def _run(self, check_func: HealthCheck) -> HealthCheckResult:
        try:
            return await check_func()
        except (
            NoodlePersistenceError,
            RuntimeError,
            ValueError,
            TypeError,
            AttributeError,
            OSError,
        ) as e:
            name = getattr(check_func, "__name__", "check")
            logger.error(f"Health check {name} raised: {e}", exc_info=True)
            return HealthCheckResult(name, HealthStatus.UNKNOWN, f"Check failed: {e}")

    async def check_all(self) -> dict[str, Any]:
        """
        Run every registered check, in registration order.

        Returns:
            ``{"status": ..., "timestamp": ..., "checks": [result dicts]}``
        """
        results = [await self._run(check_func) for check_func in self._checks]
        return {
            "status": overall_status(results).value,
            "timestamp": datetime.now().isoformat(),
            "checks": [result.to_dict() for result in results],
        }


async def check_mongodb_health(
    mongo_client: Any | None, timeout_seconds: float = 5.0
) -> HealthCheckResult:
    """
    Ping MongoDB, reporting the round trip time.

    Args:
        mongo_client: Motor client (None when not connected)
        timeout_seconds: Give up on the ping after this long
    """
    if mongo_client is None:
        return HealthCheckResult(
            "mongodb", HealthStatus.UNHEALTHY, "MongoDB client not initialized"
        )

    started = time.perf_counter()
    try:
        await asyncio.wait_for(mongo_client.admin.command("ping"), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        return HealthCheckResult(
            "mongodb", HealthStatus.UNHEALTHY, f"MongoDB ping timed out after {timeout_seconds}s"
        )
    except (ConnectionFailure, OperationFailure, ServerSelectionTimeoutError) as e:
        return HealthCheckResult("mongodb", HealthStatus.UNHEALTHY, f"MongoDB ping failed: {e}")

    return HealthCheckResult(
        "mongodb",
        HealthStatus.HEALTHY,
        "MongoDB answered ping",
        details={"ping_ms": round((time.perf_counter() - started) * 1000, 2)},
    )


async def check_persistence_health(persistence: Any | None) -> HealthCheckResult:
    """
    Check that the persistence layer is initialized and its order status
    region answers.

    Args:
        persistence: NoodlePersistence instance
    """
    if persistence is None or not persistence.initialized:
        return HealthCheckResult(
            "persistence", HealthStatus.UNHEALTHY, "Persistence layer not initialized"
        )

    region = persistence.order_status_region
    try:
        entries = await region.size()
    except NoodlePersistenceError as e:
        return HealthCheckResult(
            "persistence",
            HealthStatus.DEGRADED,
            f"Order status region '{region.name}' unavailable: {e}",
        )

    return HealthCheckResult(
        "persistence",
        HealthStatus.HEALTHY,
        "Persistence layer is ready",
        details={
            "db_name": persistence.config.db_name,
            "analysis_strategy": persistence.config.analysis_strategy,
            "order_status_region": region.name,
            "order_status_entries": entries,
        },
    )
