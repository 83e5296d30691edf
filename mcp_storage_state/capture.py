"""
Snapshot capture: read a live session's cookies and local storage.
"""

from __future__ import annotations

import logging

from .exceptions import SessionUnavailableError
from .models import StorageStateSnapshot
from .typing_utils import BrowserSession, is_storage_item

logger = logging.getLogger("mcp_storage_state.capture")


async def capture(session: BrowserSession | None) -> StorageStateSnapshot:
    """
    Capture the storage state of a browsing session.

    Only reads from the session: the cookie jar, the list of origins holding
    storage and each origin's local storage. The tab is never navigated.

    Args:
        session: The active browser session

    Returns:
        A StorageStateSnapshot of the session's cookies and local storage

    Raises:
        SessionUnavailableError: If there is no active session
    """
    if session is None:
        raise SessionUnavailableError("No active browser tab to capture storage state from")

    cookies = await session.get_cookies()

    origins = []
    for origin in await session.storage_origins():
        items = await session.get_local_storage(origin)
        origins.append(
            {
                "origin": origin,
                "localStorage": [
                    {"name": item["name"], "value": item["value"]}
                    for item in items
                    if is_storage_item(item)
                ],
            }
        )

    snapshot = StorageStateSnapshot.model_validate(
        {"cookies": list(cookies), "origins": origins}
    )
    logger.info(
        f"Captured {len(snapshot.cookies)} cookies and {len(snapshot.origins)} origins"
    )
    return snapshot
