"""Pydantic models for the health status document."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StatusLabel(str, Enum):
    OK = "OK"
    WARNING = "Warning"
    UNAVAILABLE = "Unavailable"


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class Runtime(BaseModel):
    """Process statistics, refreshed at most once per runtime TTL."""

    model_config = ConfigDict(frozen=True)

    collected_at: datetime = Field(default=_EPOCH, exclude=True)
    arch: str = ""
    os: str = ""
    version: str = ""
    goroutines_count: int = 0  # live threads; name kept for wire compatibility
    heap_objects_count: int = 0
    alloc_bytes: int = 0
    total_alloc_bytes: int = 0


class Status(BaseModel):
    """Aggregate health snapshot returned by Checker.status()."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    has_warnings: bool
    status: StatusLabel
    time: datetime
    since: datetime
    runtime: Runtime
    failures: dict[str, str] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)


class RemoteStatus(BaseModel):
    """The parts of a remote Status document that remote checks merge.

    Any JSON object is accepted; missing keys read as empty.
    """

    model_config = ConfigDict(extra="ignore")

    failures: dict[str, str] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)

    @field_validator("failures", "warnings", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: "" if msg is None else msg for k, msg in v.items()}
        return v
