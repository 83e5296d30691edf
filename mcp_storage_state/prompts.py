"""
MCP prompt definitions for the storage state plugin.
"""

from __future__ import annotations

from pydantic import Field

from .server import mcp


@mcp.prompt()  # pragma: no cover
def save_session_assistant(
    path: str = Field(..., description="Absolute path of the storage state file"),
) -> str:  # vulture: ignore
    """
    Creates a prompt to capture an authenticated session for later reuse.
    """
    return f"""
    I want to keep the browser session I am logged into so I can reuse it later.

    Please help me:
    1. Confirm the login has completed in the browser tab
    2. Use the browser_save_storage_state tool with path "{path}"
    3. Tell me how many cookies and origins were saved

    The file holds login cookies in plain text, so it should stay private.
    """


@mcp.prompt()  # pragma: no cover
def restore_session_assistant(
    path: str = Field(..., description="Absolute path of the storage state file"),
) -> str:  # vulture: ignore
    """
    Creates a prompt to restore a previously saved session.
    """
    return f"""
    I want to skip logging in again by restoring a saved browser session.

    Please help me:
    1. Use the browser_load_storage_state tool with path "{path}"
    2. Report how many cookies were applied and which origins received local storage
    3. If the load fails, tell me whether it was partially applied before failing

    Loading overwrites the browser's cookies and local storage for the saved origins,
    and leaves the tab on the last origin it visited.
    """
