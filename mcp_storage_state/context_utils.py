"""Context utilities for MCP tools."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from .exceptions import SessionUnavailableError
from .session import BrowserManager


def _get_lifespan_context(ctx: Context) -> Any:
    """Extract the lifespan context from MCP context.

    Args:
        ctx: The MCP context object

    Returns:
        The lifespan context dictionary or None if not available
    """
    direct = getattr(ctx, "lifespan_context", None)
    if isinstance(direct, dict):
        return direct

    try:
        request_context = ctx.request_context
    except (AttributeError, ValueError):
        return None

    return getattr(request_context, "lifespan_context", None)


def get_browser_manager(ctx: Context) -> BrowserManager:
    """Get the browser manager started by the server lifespan.

    Raises:
        SessionUnavailableError: If the server has no browser
    """
    lifespan_ctx = _get_lifespan_context(ctx)
    manager = lifespan_ctx.get("browser_manager") if isinstance(lifespan_ctx, dict) else None
    if manager is None:
        raise SessionUnavailableError("Browser is not running")
    return manager
