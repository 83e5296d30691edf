"""
Snapshot restore: replay a snapshot into a live browsing session.

Restoring mutates the session and is not transactional. Cookies go in first
as one batch, then each origin is visited in order on the one shared tab and
its local storage written from inside the page. The first failure aborts the
restore; whatever was applied before it stays applied, and the raised error
carries a RestoreReport describing how far the restore got.
"""

from __future__ import annotations

import logging

from .config import SET_LOCAL_STORAGE_SCRIPT
from .exceptions import (
    NavigationError,
    ScriptEvaluationError,
    SessionUnavailableError,
    StorageStateError,
)
from .models import OriginState, RestorePhase, RestoreReport, StorageStateSnapshot
from .serializer import load_snapshot
from .typing_utils import BrowserSession, FileSystem, PathLike

logger = logging.getLogger("mcp_storage_state.restore")


async def restore(
    session: BrowserSession | None, snapshot: StorageStateSnapshot
) -> RestoreReport:
    """
    Apply a snapshot's cookies and local storage to a session.

    Args:
        session: The active browser session
        snapshot: The snapshot to apply

    Returns:
        A RestoreReport in the DONE phase

    Raises:
        SessionUnavailableError: If there is no active session
        NavigationError: If the tab cannot be navigated to an origin, or ends
            up on another origin before local storage is written
        ScriptEvaluationError: If local storage cannot be written
        StorageStateError: Any other failure, with the report in ``details``
    """
    if session is None:
        raise SessionUnavailableError("No active browser tab to restore storage state into")

    report = RestoreReport()
    try:
        if snapshot.cookies:
            await session.add_cookies([cookie.to_dict() for cookie in snapshot.cookies])
            report.cookies_applied = len(snapshot.cookies)
        report.phase = RestorePhase.COOKIES_APPLIED

        for state in snapshot.origins:
            report.current_origin = state.origin
            await _restore_origin(session, state, report)
            report.origins_processed += 1
    except Exception as e:
        report.phase = RestorePhase.FAILED
        logger.error(
            f"Restore failed at {report.current_origin or 'cookies'}: {e} "
            f"(cookies applied: {report.cookies_applied}, "
            f"origins injected: {report.origins_injected})"
        )
        if isinstance(e, StorageStateError):
            e.details.setdefault("report", report.to_dict())
            raise
        raise StorageStateError(
            f"Restore failed: {e}", details={"report": report.to_dict()}
        ) from e

    report.phase = RestorePhase.DONE
    report.current_origin = None
    logger.info(
        f"Restored {report.cookies_applied} cookies and {report.origins_injected} "
        f"origins with local storage ({report.navigations} navigations)"
    )
    return report


async def _restore_origin(
    session: BrowserSession, state: OriginState, report: RestoreReport
) -> None:
    if not session.current_url().startswith(state.origin):
        report.phase = RestorePhase.NAVIGATING
        try:
            await session.navigate(state.origin)
        except StorageStateError:
            raise
        except Exception as e:
            raise NavigationError(
                f"Failed to navigate to {state.origin}: {e}",
                details={"origin": state.origin},
            ) from e
        report.navigations += 1

    if not state.local_storage:
        return

    # A redirect can leave the tab on another site; never write there
    landed_on = session.current_url()
    if not landed_on.startswith(state.origin):
        raise NavigationError(
            f"Tab is on {landed_on} instead of {state.origin}, not writing local storage",
            details={"origin": state.origin, "url": landed_on},
        )

    report.phase = RestorePhase.INJECTING
    items = [entry.model_dump() for entry in state.local_storage]
    try:
        await session.evaluate_in_page(SET_LOCAL_STORAGE_SCRIPT, items)
    except StorageStateError:
        raise
    except Exception as e:
        raise ScriptEvaluationError(
            f"Failed to write local storage for {state.origin}: {e}",
            details={"origin": state.origin},
        ) from e
    report.origins_injected += 1


async def restore_from_file(
    session: BrowserSession | None,
    path: PathLike,
    fs: FileSystem | None = None,
) -> RestoreReport:
    """
    Load the snapshot at ``path`` and restore it into ``session``.

    The snapshot is fully parsed before anything is applied, so a missing or
    malformed file leaves the session untouched.
    """
    if session is None:
        raise SessionUnavailableError("No active browser tab to restore storage state into")
    snapshot = await load_snapshot(path, fs)
    return await restore(session, snapshot)
