"""
Operation classification and input checks for the storage state tools.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ResourceType(Enum):
    """Types of resources that can be accessed via MCP."""

    STORAGE_STATE_READ = "storage_state_read"
    STORAGE_STATE_WRITE = "storage_state_write"
    SERVER_INFO = "server_info"


class OperationType(Enum):
    """Effect of an operation on the browser session."""

    READ_ONLY = "readOnly"          # Session is not modified
    DESTRUCTIVE = "destructive"     # Session cookies or storage are overwritten


@dataclass
class OperationRecord:
    """Audit record of a classified operation call."""

    resource_type: ResourceType
    operation: str
    operation_type: OperationType
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource_type": self.resource_type.value,
            "operation": self.operation,
            "operation_type": self.operation_type.value,
            "timestamp": self.timestamp,
        }


class SecurityManager:
    """Validates tool inputs and keeps an audit log of classified calls."""

    def __init__(self, max_audit_entries: int = 200) -> None:
        self.audit_log: list[OperationRecord] = []
        self._max_audit_entries = max_audit_entries

    def validate_snapshot_path(self, path: str) -> Path:
        """Check that a snapshot path is a usable absolute filesystem path."""
        if not path or not path.strip():
            raise SecurityError("Storage state path must not be empty")
        if "\x00" in path:
            raise SecurityError("Storage state path must not contain NUL bytes")

        candidate = Path(path)
        if not candidate.is_absolute():
            raise SecurityError(f"Storage state path must be absolute: {path}")
        if candidate.name in ("", ".", ".."):
            raise SecurityError(f"Storage state path must name a file: {path}")
        return candidate

    def record_operation(self, record: OperationRecord) -> None:
        self.audit_log.append(record)
        overflow = len(self.audit_log) - self._max_audit_entries
        if overflow > 0:
            del self.audit_log[:overflow]

    def clear(self) -> None:
        self.audit_log.clear()


# Global security manager instance
security_manager = SecurityManager()


def secure_operation(
    resource_type: ResourceType,
    operation: str,
    operation_type: OperationType = OperationType.READ_ONLY,
    description: str = "",
) -> Callable:
    """Decorator classifying an MCP operation and recording each call."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if operation_type is OperationType.DESTRUCTIVE:
                logger.info(f"Destructive operation {operation}: {description}")

            security_manager.record_operation(
                OperationRecord(
                    resource_type=resource_type,
                    operation=operation,
                    operation_type=operation_type,
                )
            )
            return await func(*args, **kwargs)

        wrapper.operation_type = operation_type  # type: ignore[attr-defined]
        return wrapper
    return decorator


class SecurityError(Exception):
    """Custom exception for security-related errors."""
    pass
