"""
Browser storage state plugin for Model Context Protocol.

This package saves a browser session's cookies and local storage to a file
and restores them later, so a session does not need to log in again.
"""

__version__ = "0.1.0"

from .capture import capture
from .exceptions import (
    NavigationError,
    ScriptEvaluationError,
    SessionUnavailableError,
    SnapshotNotFoundError,
    SnapshotParseError,
    StorageIOError,
    StorageStateError,
)
from .main import main
from .models import Cookie, LocalStorageEntry, OriginState, RestoreReport, StorageStateSnapshot
from .restore import restore, restore_from_file
from .serializer import load_snapshot, save_snapshot
from .server import mcp

# Import tools
from .tools import browser_load_storage_state, browser_save_storage_state

__all__ = [
    "Cookie",
    "LocalStorageEntry",
    "NavigationError",
    "OriginState",
    "RestoreReport",
    "ScriptEvaluationError",
    "SessionUnavailableError",
    "SnapshotNotFoundError",
    "SnapshotParseError",
    "StorageIOError",
    "StorageStateError",
    "StorageStateSnapshot",
    "browser_load_storage_state",
    "browser_save_storage_state",
    "capture",
    "load_snapshot",
    "main",
    "mcp",
    "restore",
    "restore_from_file",
    "save_snapshot",
]


# Define __main__ entry point
def __main__() -> None:
    main()
