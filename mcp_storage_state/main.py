"""
Browser storage state plugin for Model Context Protocol.
This module starts the MCP server that saves and restores browser sessions.
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import os
import signal
import threading
import time
from types import FrameType
from typing import Any

from .config import (
    BROWSER_TYPE,
    DEFAULT_SERVER_PORT,
    DEFAULT_TRANSPORT,
    HEADLESS,
    SUPPORTED_BROWSERS,
    TRANSPORTS,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("mcp_storage_state")

# Global variables to track MCP instance
mcp_instance = None
server_module = None
# Flag to track if the server is shutting down
is_shutting_down = False
# Timestamp of the last interrupt signal
last_interrupt_time: float = 0.0


def _close_browser_from_signal() -> None:
    if not (server_module and hasattr(server_module, "close_browser")):
        return
    try:
        try:
            loop = asyncio.get_event_loop()
            if loop.is_running():
                asyncio.create_task(server_module.close_browser())  # noqa: RUF006
            else:
                loop.run_until_complete(server_module.close_browser())
        except RuntimeError:
            logger.info("No active event loop, cannot close browser cleanly")
    except Exception as e:
        logger.error(f"Error closing browser: {e}")


def signal_handler(sig: int, _frame: FrameType | None) -> None:
    """Handle process interruption signals like SIGINT (Ctrl+C)."""
    global is_shutting_down, last_interrupt_time

    current_time = time.time()

    match sig:
        case signal.SIGINT:
            # Double Ctrl+C within a second forces exit
            if is_shutting_down or (
                current_time - last_interrupt_time < 1.0 and last_interrupt_time > 0
            ):
                logger.info("Forced server shutdown (double Ctrl+C)")
                os._exit(1)
            else:
                logger.info("Graceful shutdown initiated (Ctrl+C)")
        case signal.SIGTERM:
            logger.info("Termination signal received")
        case _:
            logger.info(f"Unhandled signal: {sig}")

    is_shutting_down = True
    last_interrupt_time = current_time
    logger.info("Server shutdown requested by user")

    _close_browser_from_signal()

    def delayed_exit() -> None:
        time.sleep(0.5)
        logger.info("Terminating process")
        os._exit(0)

    threading.Thread(target=delayed_exit, daemon=True).start()


def initialize_mcp(browser_type: str = BROWSER_TYPE, headless: bool = HEADLESS) -> Any:
    """Initialize MCP server and register components."""
    global server_module
    server_module = importlib.import_module(".server", package="mcp_storage_state")
    server_module.browser_options.update(browser_type=browser_type, headless=headless)
    mcp = server_module.mcp

    # Import all MCP components to register them
    importlib.import_module(".tools", package="mcp_storage_state")
    importlib.import_module(".resources", package="mcp_storage_state")
    importlib.import_module(".prompts", package="mcp_storage_state")

    return mcp


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Browser storage state plugin for Model Context Protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_SERVER_PORT,
        help=f"Port number for the MCP server (default: {DEFAULT_SERVER_PORT})",
    )
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=DEFAULT_TRANSPORT,
        help=f"MCP transport to serve on (default: {DEFAULT_TRANSPORT})",
    )
    parser.add_argument(
        "--browser",
        choices=SUPPORTED_BROWSERS,
        default=BROWSER_TYPE,
        help=f"Browser engine to launch (default: {BROWSER_TYPE})",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        default=not HEADLESS,
        help="Show the browser window instead of running headless",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Run the MCP server."""
    global mcp_instance, is_shutting_down

    signal.signal(signal.SIGINT, signal_handler)

    try:
        args = parse_args()

        mcp_instance = initialize_mcp(browser_type=args.browser, headless=not args.headed)
        # Only the HTTP transports listen on a port
        mcp_instance.settings.port = args.port

        if args.transport == "stdio":
            logger.info("Starting storage state MCP server on stdio")
        else:
            logger.info(
                "Starting storage state MCP server (%s) on port %s", args.transport, args.port
            )
        logger.info("- Tool: browser_save_storage_state (read-only)")
        logger.info("- Tool: browser_load_storage_state (destructive)")
        logger.info("- Tool: health_check")
        logger.info("- Tool: get_server_info")
        logger.info("- Resource: docs://storage-state")
        logger.info("- Prompt: save_session_assistant")
        logger.info("- Prompt: restore_session_assistant")

        mcp_instance.run(transport=args.transport)
    except KeyboardInterrupt:
        is_shutting_down = True
        logger.info("Server shutdown requested by user")

        if server_module and hasattr(server_module, "close_browser"):
            try:
                try:
                    loop = asyncio.get_event_loop()
                    loop.run_until_complete(server_module.close_browser())
                except RuntimeError:
                    logger.info("No active event loop, cannot close browser cleanly")
            except Exception as e:
                logger.error(f"Error closing browser: {e}")
    except Exception as e:
        logger.error("Error starting server: %s", e, exc_info=True)
        raise


if __name__ == "__main__":
    main()
