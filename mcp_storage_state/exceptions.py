"""
Exception taxonomy for the storage state plugin.

Every error aborts the operation that raised it; nothing here is retried.
Errors raised part-way through a restore carry the partial progress report
in ``details["report"]`` so callers can see what was already applied.
"""

from typing import Any


class StorageStateError(Exception):
    """Base exception for storage state errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class SessionUnavailableError(StorageStateError):
    """No active browser session or tab."""

    pass


class StorageIOError(StorageStateError):
    """Reading, writing or creating directories for a snapshot failed."""

    pass


class SnapshotNotFoundError(StorageIOError):
    """The snapshot file does not exist."""

    pass


class SnapshotParseError(StorageStateError):
    """Snapshot content is not valid JSON or does not match the expected shape."""

    pass


class NavigationError(StorageStateError):
    """Navigating the tab to an origin failed."""

    pass


class ScriptEvaluationError(StorageStateError):
    """Evaluating the storage script in the page failed."""

    pass


# Structured error result type
class ErrorResult:
    """Structured error result for tool responses."""

    def __init__(self, error: Exception, context: str = "", recoverable: bool = False):
        self.error = error
        self.context = context
        self.recoverable = recoverable
        self.error_type = type(error).__name__
        self.message = str(error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
            "details": getattr(self.error, "details", {}),
        }
