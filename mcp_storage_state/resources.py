"""
MCP resources describing the storage state file format.
"""

from __future__ import annotations

from .server import mcp

STORAGE_STATE_DOCS = """
# Browser Storage State

## Tools

### browser_save_storage_state
Saves the cookies and local storage of the browser to a JSON file.
Read-only for the browser. Parent directories are created and an existing
file at the path is overwritten.

Parameters:
- path (required): Absolute path of the JSON file to write

### browser_load_storage_state
Loads cookies and local storage from a JSON file into the browser.
Destructive: existing cookies with the same name, domain and path are
replaced, and local storage keys in the file overwrite those in the page.

Parameters:
- path (required): Absolute path of the JSON file to read

Order of operations:
1. All cookies are added in one batch
2. For each origin, in file order, the tab navigates to the origin unless it
   is already there, then writes the origin's local storage entries in order

If any step fails the load stops. Nothing is rolled back: cookies and origins
applied before the failure stay applied, and the error reports how far the
load got. The tab is left on the last origin visited.

## File format

```json
{
  "cookies": [
    {"name": "session", "value": "abc", "domain": "example.com", "path": "/",
     "expires": -1, "httpOnly": true, "secure": true, "sameSite": "Lax"}
  ],
  "origins": [
    {"origin": "https://example.com",
     "localStorage": [{"name": "theme", "value": "dark"}]}
  ]
}
```

- `cookies` and `origins` must be arrays; every origin needs an `origin` string
- Unknown fields are ignored
- When an origin appears twice, the last entry is used
- Within an origin, a repeated `name` takes the last value

The file is not encrypted. Treat it like a password.
"""


@mcp.resource("docs://storage-state")  # pragma: no cover
def get_storage_state_docs() -> str:  # vulture: ignore
    """
    Documentation for the storage state tools and file format.
    """
    return STORAGE_STATE_DOCS
