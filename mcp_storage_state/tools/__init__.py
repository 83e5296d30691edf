"""
Tools for the storage state plugin.
This module contains the tools that save and load browser storage state,
and the tools that report server health.
"""

from mcp_storage_state.tools.health import get_server_info, health_check
from mcp_storage_state.tools.storage import (
    browser_load_storage_state,
    browser_save_storage_state,
)

__all__ = [
    "browser_load_storage_state",
    "browser_save_storage_state",
    "get_server_info",
    "health_check",
]
