"""
Data models for the storage state plugin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    field_validator,
    model_validator,
)

logger = logging.getLogger("mcp_storage_state.models")

# Snapshot values are immutable and tolerate unknown fields on read
_SNAPSHOT_CONFIG = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

# Expiry in seconds since the epoch; JSON integers are accepted, strings and
# non-finite values are not
ExpiryTimestamp = Annotated[StrictFloat, AllowInfNan(False)]


class Cookie(BaseModel):
    """A single cookie, passed through to the browser as-is."""

    model_config = _SNAPSHOT_CONFIG

    name: str
    value: str
    domain: str
    path: str
    expires: ExpiryTimestamp | None = None
    http_only: StrictBool | None = Field(default=None, alias="httpOnly")
    secure: StrictBool | None = None
    same_site: str | None = Field(default=None, alias="sameSite")

    def to_dict(self) -> dict[str, Any]:
        """Return the cookie in the browser's camelCase shape, unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LocalStorageEntry(BaseModel):
    """A name/value pair in an origin's local storage."""

    model_config = _SNAPSHOT_CONFIG

    name: str
    value: str


class OriginState(BaseModel):
    """Local storage captured for one origin."""

    model_config = _SNAPSHOT_CONFIG

    origin: str
    local_storage: tuple[LocalStorageEntry, ...] = Field(default=(), alias="localStorage")

    def effective_items(self) -> dict[str, str]:
        """Items as the page sees them once every entry is applied in order."""
        return {entry.name: entry.value for entry in self.local_storage}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class StorageStateSnapshot(BaseModel):
    """Cookies plus per-origin local storage of a browsing session."""

    model_config = _SNAPSHOT_CONFIG

    cookies: tuple[Cookie, ...]
    origins: tuple[OriginState, ...]

    @model_validator(mode="before")
    @classmethod
    def _require_arrays(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("storage state must be a JSON object")
        for key in ("cookies", "origins"):
            if key in data and not isinstance(data[key], (list, tuple)):
                raise ValueError(f"'{key}' must be an array")
        return data

    @field_validator("origins")
    @classmethod
    def _collapse_duplicate_origins(
        cls, origins: tuple[OriginState, ...]
    ) -> tuple[OriginState, ...]:
        # Last occurrence wins and takes the position of that occurrence
        by_origin: dict[str, OriginState] = {}
        for state in origins:
            if by_origin.pop(state.origin, None) is not None:
                logger.warning(
                    f"Duplicate origin {state.origin} in storage state, keeping the last entry"
                )
            by_origin[state.origin] = state
        return tuple(by_origin.values())

    @classmethod
    def empty(cls) -> StorageStateSnapshot:
        return cls(cookies=[], origins=[])

    def to_dict(self) -> dict[str, Any]:
        """Canonical JSON structure of the snapshot."""
        return {
            "cookies": [cookie.to_dict() for cookie in self.cookies],
            "origins": [state.to_dict() for state in self.origins],
        }


class RestorePhase(Enum):
    """Progress of a restore through its steps."""

    START = "start"
    COOKIES_APPLIED = "cookies_applied"
    NAVIGATING = "navigating"
    INJECTING = "injecting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RestoreReport:
    """What a restore has applied so far."""

    cookies_applied: int = 0
    navigations: int = 0
    origins_processed: int = 0
    origins_injected: int = 0
    phase: RestorePhase = RestorePhase.START
    current_origin: str | None = None

    @property
    def partially_applied(self) -> bool:
        return self.phase is RestorePhase.FAILED and (
            self.cookies_applied > 0 or self.origins_injected > 0
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for tool responses."""
        return {
            "cookies_applied": self.cookies_applied,
            "navigations": self.navigations,
            "origins_processed": self.origins_processed,
            "origins_injected": self.origins_injected,
            "phase": self.phase.value,
            "current_origin": self.current_origin,
            "partially_applied": self.partially_applied,
        }
