"""Centralized configuration for the storage state MCP plugin."""

import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


# Snapshot file format
SNAPSHOT_ENCODING = "utf-8"
SNAPSHOT_INDENT = 2

# Navigation waits for this load state before storage is injected
NAVIGATION_WAIT_UNTIL = "load"

# In-page function used to write local storage entries, called with the
# entries as its single argument
SET_LOCAL_STORAGE_SCRIPT = """(items) => {
  for (const item of items)
    localStorage.setItem(item.name, item.value);
}"""

# Browser configuration
SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")
DEFAULT_BROWSER = "chromium"
DEFAULT_HEADLESS = True
BROWSER_TYPE = os.environ.get("MCP_BROWSER", DEFAULT_BROWSER)
HEADLESS = _env_flag("MCP_HEADLESS", DEFAULT_HEADLESS)

# Server configuration
SERVER_NAME = "Browser Storage State"
SERVER_VERSION = "0.1.0"
DEFAULT_SERVER_PORT = 3000
TRANSPORTS = ("stdio", "sse", "streamable-http")
DEFAULT_TRANSPORT = "stdio"

# Feature flags
# Request timing and error counters for the health tools
ENABLE_MONITORING = _env_flag("MCP_ENABLE_MONITORING", True)

