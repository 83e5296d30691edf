"""
Snapshot serialization to and from durable JSON files.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .config import SNAPSHOT_ENCODING, SNAPSHOT_INDENT
from .exceptions import SnapshotNotFoundError, SnapshotParseError, StorageIOError
from .models import StorageStateSnapshot
from .typing_utils import FileSystem, PathLike

logger = logging.getLogger("mcp_storage_state.serializer")


class LocalFileSystem:
    """Local disk access, with blocking calls moved off the event loop."""

    async def read_text(self, path: PathLike) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding=SNAPSHOT_ENCODING)

    async def write_text(self, path: PathLike, data: str) -> None:
        await asyncio.to_thread(Path(path).write_text, data, encoding=SNAPSHOT_ENCODING)

    async def mkdir_recursive(self, path: PathLike) -> None:
        await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)


local_filesystem = LocalFileSystem()


def dumps_snapshot(snapshot: StorageStateSnapshot) -> str:
    """Encode a snapshot as canonical, human-readable JSON."""
    return json.dumps(
        snapshot.to_dict(), indent=SNAPSHOT_INDENT, ensure_ascii=False, allow_nan=False
    )


def parse_snapshot(text: str, source: str = "<string>") -> StorageStateSnapshot:
    """
    Parse snapshot JSON into a StorageStateSnapshot.

    Raises:
        SnapshotParseError: If the text is not JSON or does not have the snapshot shape
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotParseError(
            f"Storage state file is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            details={"path": source},
        ) from e

    try:
        return StorageStateSnapshot.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise SnapshotParseError(
            f"Storage state file has an unexpected shape: {'; '.join(errors)}",
            details={"path": source, "errors": errors},
        ) from e


async def save_snapshot(
    snapshot: StorageStateSnapshot,
    path: PathLike,
    fs: FileSystem | None = None,
) -> Path:
    """
    Write a snapshot to ``path``, creating missing parent directories.

    An existing file at ``path`` is overwritten without confirmation.

    Raises:
        StorageIOError: If the directory cannot be created or the file written
    """
    fs = fs or local_filesystem
    target = Path(path)
    payload = dumps_snapshot(snapshot)

    try:
        await fs.mkdir_recursive(target.parent)
        await fs.write_text(target, payload)
    except OSError as e:
        raise StorageIOError(
            f"Failed to save storage state to {target}: {e.strerror or e}",
            details={"path": str(target)},
        ) from e

    logger.info(f"Storage state saved to {target}")
    return target


async def load_snapshot(path: PathLike, fs: FileSystem | None = None) -> StorageStateSnapshot:
    """
    Read and parse the snapshot at ``path``.

    Raises:
        SnapshotNotFoundError: If the file does not exist
        StorageIOError: If the file cannot be read
        SnapshotParseError: If the content is malformed
    """
    fs = fs or local_filesystem
    target = Path(path)

    try:
        text = await fs.read_text(target)
    except FileNotFoundError as e:
        raise SnapshotNotFoundError(
            f"Storage state file not found: {target}",
            details={"path": str(target)},
        ) from e
    except UnicodeDecodeError as e:
        raise SnapshotParseError(
            f"Storage state file is not valid {SNAPSHOT_ENCODING}: {target}",
            details={"path": str(target)},
        ) from e
    except OSError as e:
        raise StorageIOError(
            f"Failed to read storage state from {target}: {e.strerror or e}",
            details={"path": str(target)},
        ) from e

    snapshot = parse_snapshot(text, source=str(target))
    logger.info(
        f"Storage state loaded from {target} "
        f"({len(snapshot.cookies)} cookies, {len(snapshot.origins)} origins)"
    )
    return snapshot
