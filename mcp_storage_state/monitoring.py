"""
Performance monitoring and health indicators for the storage state server.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import psutil

from . import config

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Health status levels."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class PerformanceMetrics:
    """Performance metrics collection."""

    # Request metrics
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time: float = 0.0

    # System metrics
    cpu_usage: float = 0.0
    memory_usage: float = 0.0
    memory_usage_mb: float = 0.0

    # Storage state metrics
    snapshots_saved: int = 0
    snapshots_restored: int = 0

    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "success_rate": self.successful_requests / max(self.total_requests, 1),
            "average_response_time": self.average_response_time,
            "cpu_usage": self.cpu_usage,
            "memory_usage": self.memory_usage,
            "memory_usage_mb": self.memory_usage_mb,
            "snapshots_saved": self.snapshots_saved,
            "snapshots_restored": self.snapshots_restored,
            "timestamp": self.timestamp,
        }


@dataclass
class HealthCheck:
    """Individual health check result."""

    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    check_duration: float = 0.0
    timestamp: float = field(default_factory=time.time)


class PerformanceMonitor:
    """Monitors performance metrics and health indicators."""

    def __init__(self) -> None:
        self.start_time = time.time()
        self.request_times: list[float] = []
        self.max_history_size = 100

    def record_request(self, duration: float, success: bool) -> None:
        """Record a request with its duration and success status."""
        self.request_times.append(duration)

        # Keep only last 100 request times
        if len(self.request_times) > self.max_history_size:
            self.request_times = self.request_times[-self.max_history_size:]

    def reset(self) -> None:
        self.start_time = time.time()
        self.request_times.clear()

    def get_current_metrics(self) -> PerformanceMetrics:
        """Get current performance metrics."""
        cpu_percent = psutil.cpu_percent(interval=None)
        memory_info = psutil.virtual_memory()
        process_memory = psutil.Process().memory_info()

        avg_response_time = 0.0
        if self.request_times:
            avg_response_time = sum(self.request_times) / len(self.request_times)

        from .server import server_metrics

        total_requests = server_metrics["requests_processed"]
        total_errors = server_metrics["errors_count"]

        return PerformanceMetrics(
            total_requests=int(total_requests),
            successful_requests=int(total_requests - total_errors),
            failed_requests=int(total_errors),
            average_response_time=avg_response_time,
            cpu_usage=cpu_percent,
            memory_usage=memory_info.percent,
            memory_usage_mb=process_memory.rss / 1024 / 1024,
            snapshots_saved=int(server_metrics["snapshots_saved"]),
            snapshots_restored=int(server_metrics["snapshots_restored"]),
        )

    async def perform_health_check(self, name: str, check_func: Callable) -> HealthCheck:
        """Perform an individual health check."""
        start_time = time.time()

        try:
            if asyncio.iscoroutinefunction(check_func):
                result = await check_func()
            else:
                result = check_func()

            return HealthCheck(
                name=name,
                status=result.get("status", HealthStatus.HEALTHY),
                message=result.get("message", "Check completed"),
                details=result.get("details", {}),
                check_duration=time.time() - start_time,
            )

        except Exception as e:
            logger.error(f"Health check '{name}' failed: {e}")

            return HealthCheck(
                name=name,
                status=HealthStatus.UNHEALTHY,
                message=f"Check failed: {e!s}",
                details={"exception": str(e)},
                check_duration=time.time() - start_time,
            )

    def check_browser_health(self) -> dict[str, Any]:
        """Check that the browser tab is open."""
        from .server import browser_manager

        if browser_manager is None:
            return {
                "status": HealthStatus.UNHEALTHY,
                "message": "Browser not initialized",
            }

        if not browser_manager.is_running:
            return {
                "status": HealthStatus.UNHEALTHY,
                "message": "Browser tab is closed",
            }

        return {
            "status": HealthStatus.HEALTHY,
            "message": "Browser tab is open",
            "details": {
                "browser": browser_manager.browser_type,
                "headless": browser_manager.headless,
            },
        }

    def check_memory_health(self) -> dict[str, Any]:
        """Check memory usage health."""
        memory_info = psutil.virtual_memory()
        process_memory_mb = psutil.Process().memory_info().rss / 1024 / 1024

        # Memory usage thresholds
        system_memory_threshold = 90.0  # percent
        process_memory_threshold = 500.0  # MB

        if memory_info.percent > system_memory_threshold:
            status = HealthStatus.UNHEALTHY
            message = f"High system memory usage: {memory_info.percent:.1f}%"
        elif process_memory_mb > process_memory_threshold:
            status = HealthStatus.DEGRADED
            message = f"High process memory usage: {process_memory_mb:.1f}MB"
        else:
            status = HealthStatus.HEALTHY
            message = "Memory usage is normal"

        return {
            "status": status,
            "message": message,
            "details": {
                "system_memory_percent": memory_info.percent,
                "process_memory_mb": process_memory_mb,
                "available_memory_mb": memory_info.available / 1024 / 1024,
            },
        }

    def check_response_time_health(self) -> dict[str, Any]:
        """Check response time health."""
        if not self.request_times:
            return {
                "status": HealthStatus.HEALTHY,
                "message": "No requests to analyze",
            }

        avg_response_time = sum(self.request_times) / len(self.request_times)
        max_response_time = max(self.request_times)

        # Restores navigate once per origin, so allow more than a plain request
        degraded_threshold = 15.0
        unhealthy_threshold = 60.0

        if max_response_time > unhealthy_threshold:
            status = HealthStatus.UNHEALTHY
            message = f"Very slow response times detected (max: {max_response_time:.2f}s)"
        elif avg_response_time > degraded_threshold:
            status = HealthStatus.DEGRADED
            message = f"Slow average response time: {avg_response_time:.2f}s"
        else:
            status = HealthStatus.HEALTHY
            message = "Response times are normal"

        return {
            "status": status,
            "message": message,
            "details": {
                "average_response_time": avg_response_time,
                "max_response_time": max_response_time,
                "total_requests": len(self.request_times),
            },
        }

    async def get_health_status(self) -> dict[str, Any]:
        """Get comprehensive health status."""
        health_checks = [
            await self.perform_health_check("browser", self.check_browser_health),
            await self.perform_health_check("memory", self.check_memory_health),
            await self.perform_health_check("response_time", self.check_response_time_health),
        ]

        overall_status = HealthStatus.HEALTHY
        for check in health_checks:
            if check.status == HealthStatus.UNHEALTHY:
                overall_status = HealthStatus.UNHEALTHY
            elif check.status == HealthStatus.DEGRADED and overall_status == HealthStatus.HEALTHY:
                overall_status = HealthStatus.DEGRADED

        return {
            "status": overall_status.value,
            "timestamp": time.time(),
            "uptime_seconds": time.time() - self.start_time,
            "checks": {check.name: {
                "status": check.status.value,
                "message": check.message,
                "details": check.details,
                "check_duration": check.check_duration,
            } for check in health_checks},
        }


# Global performance monitor instance
performance_monitor = PerformanceMonitor()


def monitor_request(func: Callable) -> Callable:
    """Decorator to monitor request performance."""
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not config.ENABLE_MONITORING:
            return await func(*args, **kwargs)

        start_time = time.time()
        success = False

        try:
            result = await func(*args, **kwargs)
            success = True
            return result
        finally:
            performance_monitor.record_request(time.time() - start_time, success)

            from .server import server_metrics
            server_metrics["requests_processed"] += 1
            if not success:
                server_metrics["errors_count"] += 1

    return wrapper
