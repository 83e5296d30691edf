"""
Typing utilities and collaborator protocols.

The capture and restore engine never talks to a browser or a disk directly.
It is handed objects satisfying these protocols, so the Playwright adapter,
the local filesystem and the test doubles are interchangeable.
"""

from pathlib import Path
from typing import Any, Protocol, TypeGuard, runtime_checkable

CookieDict = dict[str, Any]
StorageItem = dict[str, str]
PathLike = str | Path


@runtime_checkable
class BrowserSession(Protocol):
    """The single tab (and its browser context) the engine drives."""

    async def get_cookies(self) -> list[CookieDict]:
        """Return every cookie in the context's cookie jar."""
        ...

    async def add_cookies(self, cookies: list[CookieDict]) -> None:
        """Add a batch of cookies to the cookie jar."""
        ...

    def current_url(self) -> str:
        """URL of the tab's current document."""
        ...

    async def navigate(self, url: str) -> None:
        """Navigate the tab and return once navigation has settled."""
        ...

    async def evaluate_in_page(self, script: str, arg: Any = None) -> Any:
        """Call a JS function in the page with one serialized argument."""
        ...

    async def storage_origins(self) -> list[str]:
        """Origins known to hold local storage data."""
        ...

    async def get_local_storage(self, origin: str) -> list[StorageItem]:
        """Local storage name/value pairs of an origin, read without navigating."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """File access used by the serializer."""

    async def read_text(self, path: PathLike) -> str:
        ...

    async def write_text(self, path: PathLike, data: str) -> None:
        ...

    async def mkdir_recursive(self, path: PathLike) -> None:
        ...


def is_storage_item(value: Any) -> TypeGuard[StorageItem]:
    """Type guard for a ``{"name": str, "value": str}`` mapping."""
    return (
        isinstance(value, dict)
        and isinstance(value.get("name"), str)
        and isinstance(value.get("value"), str)
    )


def ensure_string(value: str | Any, default: str = "") -> str:
    """Ensure a value is a string, with fallback."""
    if isinstance(value, str):
        return value
    elif value is None:
        return default
    else:
        return str(value)
