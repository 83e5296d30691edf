"""
Health monitoring tools for the storage state server.
"""

from __future__ import annotations

import logging
import time

from mcp.server.fastmcp import Context

from .. import config
from ..config import SERVER_NAME, SERVER_VERSION
from ..monitoring import performance_monitor
from ..security import OperationType, ResourceType, secure_operation
from ..server import server_metrics, tool

logger = logging.getLogger(__name__)


@tool()
@secure_operation(
    ResourceType.SERVER_INFO,
    "health_check",
    OperationType.READ_ONLY,
    "Server health status check",
)
async def health_check(ctx: Context) -> dict:
    """
    Get the current health status of the MCP server.

    Reports whether the browser tab is open, memory usage and response times.

    Returns:
        dict: Health status information
    """
    try:
        health_status = await performance_monitor.get_health_status()
        return {
            "status": "success",
            "data": health_status,
            "message": "Health check completed successfully"
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "error",
            "data": {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": performance_monitor.start_time,
            },
            "message": f"Health check failed: {e}"
        }


@tool()
@secure_operation(
    ResourceType.SERVER_INFO,
    "server_info",
    OperationType.READ_ONLY,
    "Basic server information",
)
async def get_server_info(ctx: Context) -> dict:
    """
    Get basic server information and status.

    Returns:
        dict: Server information including version, uptime and request counts
    """
    try:
        uptime_seconds = time.time() - server_metrics["start_time"]
        metrics = performance_monitor.get_current_metrics()

        server_info = {
            "server_name": SERVER_NAME,
            "version": SERVER_VERSION,
            "uptime_seconds": uptime_seconds,
            "uptime_formatted": _format_uptime(uptime_seconds),
            "start_time": server_metrics["start_time"],
            "monitoring_enabled": config.ENABLE_MONITORING,
            "metrics": metrics.to_dict(),
            "tools": {
                "browser_save_storage_state": OperationType.READ_ONLY.value,
                "browser_load_storage_state": OperationType.DESTRUCTIVE.value,
            },
        }

        return {
            "status": "success",
            "data": server_info,
            "message": "Server information retrieved successfully"
        }
    except Exception as e:
        logger.error(f"Failed to get server info: {e}")
        return {
            "status": "error",
            "data": {},
            "message": f"Failed to get server info: {e}"
        }


def _format_uptime(uptime_seconds: float) -> str:
    """Format uptime in a human-readable format."""
    days = int(uptime_seconds // (24 * 3600))
    hours = int((uptime_seconds % (24 * 3600)) // 3600)
    minutes = int((uptime_seconds % 3600) // 60)
    seconds = int(uptime_seconds % 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or not parts:
        parts.append(f"{seconds}s")

    return " ".join(parts)
