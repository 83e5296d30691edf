"""
Server setup and lifespan management for the storage state plugin.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import BROWSER_TYPE, HEADLESS, SERVER_NAME
from .security import security_manager
from .session import BrowserManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("mcp_storage_state.server")

# Global variables
browser_manager: BrowserManager | None = None
browser_options: dict[str, Any] = {"browser_type": BROWSER_TYPE, "headless": HEADLESS}
server_metrics = {
    "start_time": time.time(),
    "requests_processed": 0,
    "errors_count": 0,
    "snapshots_saved": 0,
    "snapshots_restored": 0,
}


@asynccontextmanager
async def app_lifespan(_server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Launch the browser on startup and close it on shutdown."""
    global browser_manager
    try:
        logger.info("Initializing storage state server")
        browser_manager = BrowserManager(**browser_options)
        await browser_manager.start()

        yield {
            "browser_manager": browser_manager,
            "security_manager": security_manager,
            "metrics": server_metrics,
        }
    finally:
        logger.info("Shutting down storage state server")
        await close_browser()

        uptime = time.time() - server_metrics["start_time"]
        logger.info(f"Server uptime: {uptime:.2f}s")
        logger.info(f"Total requests processed: {server_metrics['requests_processed']}")
        logger.info(f"Total errors: {server_metrics['errors_count']}")
        logger.info(
            f"Snapshots saved/restored: {server_metrics['snapshots_saved']}"
            f"/{server_metrics['snapshots_restored']}"
        )


mcp = FastMCP(SERVER_NAME, lifespan=app_lifespan)

# Export the tool decorator for use in tools modules
tool = mcp.tool


async def close_browser() -> None:
    """Cleanly close the browser."""
    global browser_manager
    if browser_manager:
        logger.info("Closing browser session")
        await browser_manager.close()
        browser_manager = None
