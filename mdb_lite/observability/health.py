"""
Health check utilities for MDB_LITE.

Provides health check functions for monitoring client status.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pymongo.errors import PyMongoError

from ..exceptions import MongoLiteError

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class HealthChecker:
    """
    Runs a set of registered health checks.
    """

    def __init__(self):
        self._checks: list[Callable[[], HealthCheckResult]] = []

    def register_check(self, check_func: Callable[[], HealthCheckResult]) -> None:
        """
        Register a health check function.

        Args:
            check_func: Callable that returns HealthCheckResult
        """
        self._checks.append(check_func)

    def check_all(self) -> dict[str, Any]:
        """
        Run all registered health checks.

        Returns:
            Dictionary with overall status and individual check results
        """
        results: list[HealthCheckResult] = []

        for check_func in self._checks:
            name = getattr(check_func, "__name__", repr(check_func))
            try:
                results.append(check_func())
            except (
                RuntimeError,
                ValueError,
                TypeError,
                AttributeError,
                ConnectionError,
                OSError,
            ) as e:
                logger.error(f"Health check {name} failed: {e}", exc_info=True)
                results.append(
                    HealthCheckResult(
                        name=name,
                        status=HealthStatus.UNKNOWN,
                        message=f"Check failed: {str(e)}",
                    )
                )

        statuses = [r.status for r in results]
        if HealthStatus.UNHEALTHY in statuses:
            overall_status = HealthStatus.UNHEALTHY
        elif HealthStatus.DEGRADED in statuses:
            overall_status = HealthStatus.DEGRADED
        elif all(s == HealthStatus.HEALTHY for s in statuses):
            overall_status = HealthStatus.HEALTHY
        else:
            overall_status = HealthStatus.UNKNOWN

        return {
            "status": overall_status.value,
            "timestamp": datetime.now().isoformat(),
            "checks": [r.to_dict() for r in results],
        }


def check_mongodb_health(handle: Any | None) -> HealthCheckResult:
    """
    Check MongoDB connection health through a client handle.

    Args:
        handle: MongoClientHandle instance

    Returns:
        HealthCheckResult
    """
    if handle is None:
        return HealthCheckResult(
            name="mongodb",
            status=HealthStatus.UNHEALTHY,
            message="MongoDB client not initialized",
        )

    try:
        handle.ping()
    except (MongoLiteError, PyMongoError) as e:
        return HealthCheckResult(
            name="mongodb",
            status=HealthStatus.UNHEALTHY,
            message=f"MongoDB health check failed: {str(e)}",
            details={"host": handle.host},
        )

    return HealthCheckResult(
        name="mongodb",
        status=HealthStatus.HEALTHY,
        message="MongoDB connection is healthy",
        details={"host": handle.host},
    )
