"""
Storage state tools: save the browser's cookies and local storage to a file,
and load them back into the browser.
"""

import json
import logging
import traceback

from mcp.server.fastmcp import Context
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from ..capture import capture
from ..context_utils import get_browser_manager
from ..exceptions import ErrorResult, StorageStateError
from ..monitoring import monitor_request
from ..restore import restore_from_file
from ..security import OperationType, ResourceType, secure_operation, security_manager
from ..serializer import save_snapshot
from ..server import mcp, server_metrics

# Configure logging
logger = logging.getLogger("mcp_storage_state.tools.storage")


async def _report_failure(ctx: Context, message: str, error: Exception, path: str) -> None:
    logger.error(message)
    logger.error(f"Error details: {ErrorResult(error, context=path).to_dict()}")
    logger.debug(traceback.format_exc())
    if hasattr(ctx, "error"):
        await ctx.error(message)


@mcp.tool(
    annotations=ToolAnnotations(
        title="Save browser storage state",
        readOnlyHint=True,
        destructiveHint=False,
    )
)
@secure_operation(
    ResourceType.STORAGE_STATE_READ,
    "browser_save_storage_state",
    OperationType.READ_ONLY,
    "Save cookies and local storage to a file",
)
@monitor_request
async def browser_save_storage_state(
    path: str = Field(
        ...,
        description="The absolute path where to save the storage state JSON file",
    ),
    *,
    ctx: Context,  # Context is automatically injected by MCP
) -> dict:
    """
    Save the current browser storage state (cookies, localStorage) to a file.

    Missing parent directories are created. An existing file at the path is
    overwritten.

    Args:
        path: The absolute path where to save the storage state JSON file
        ctx: MCP context object (automatically injected)

    Returns:
        dict with the saved path and the number of cookies and origins written

    Example:
        browser_save_storage_state(path="/home/me/.auth/example.json")
    """
    try:
        target = security_manager.validate_snapshot_path(path)
        manager = get_browser_manager(ctx)

        async with manager.lock:
            session = manager.current_session_or_die()
            snapshot = await capture(session)
            await save_snapshot(snapshot, target)

        server_metrics["snapshots_saved"] += 1
        return {
            "status": "success",
            "path": str(target),
            "cookies": len(snapshot.cookies),
            "origins": len(snapshot.origins),
            "code": [
                f"// Save storage state to {target}",
                f"await context.storageState({{ path: {json.dumps(str(target))} }});",
            ],
            "message": f"Storage state saved to {target}",
        }

    except Exception as e:
        message = f"Failed to save storage state to {path}: {e}"
        await _report_failure(ctx, message, e, path)
        raise ToolError(message) from e


@mcp.tool(
    annotations=ToolAnnotations(
        title="Load browser storage state",
        readOnlyHint=False,
        destructiveHint=True,
    )
)
@secure_operation(
    ResourceType.STORAGE_STATE_WRITE,
    "browser_load_storage_state",
    OperationType.DESTRUCTIVE,
    "Overwrite cookies and local storage from a file",
)
@monitor_request
async def browser_load_storage_state(
    path: str = Field(
        ...,
        description="The absolute path to the storage state JSON file to load",
    ),
    *,
    ctx: Context,  # Context is automatically injected by MCP
) -> dict:
    """
    Load browser storage state (cookies, localStorage) from a file.

    Cookies are added first, then the tab visits every origin in the file and
    writes its local storage. The tab is left on the last origin visited.
    If a step fails the load stops there; cookies and origins applied before
    the failure stay applied.

    Args:
        path: The absolute path to the storage state JSON file to load
        ctx: MCP context object (automatically injected)

    Returns:
        dict with the loaded path and a report of what was applied

    Example:
        browser_load_storage_state(path="/home/me/.auth/example.json")
    """
    try:
        target = security_manager.validate_snapshot_path(path)
        manager = get_browser_manager(ctx)

        async with manager.lock:
            session = manager.current_session_or_die()
            report = await restore_from_file(session, target)

        server_metrics["snapshots_restored"] += 1
        return {
            "status": "success",
            "path": str(target),
            "report": report.to_dict(),
            "code": [
                f"// Load storage state from {target}",
                "// Note: In Playwright, storage state is typically loaded when creating a new context",
            ],
            "message": f"Storage state loaded from {target}",
        }

    except Exception as e:
        message = f"Failed to load storage state from {path}: {e}"
        report = e.details.get("report") if isinstance(e, StorageStateError) else None
        if report and report["partially_applied"]:
            message += (
                f" (partially applied: {report['cookies_applied']} cookies, "
                f"{report['origins_injected']} origins)"
            )
        await _report_failure(ctx, message, e, path)
        raise ToolError(message) from e
