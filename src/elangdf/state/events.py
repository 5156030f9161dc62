"""Status enums and snapshot model shared by the stores."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class PollingStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


class LocationState(StrEnum):
    NOT_STARTED = "not_started"
    WATCHING = "watching"
    DEGRADED = "degraded"
    STOPPED = "stopped"


class TelemetrySnapshot(BaseModel, Generic[T]):
    """Latest value of a polling domain.

    Replaced wholesale on every successful fetch; never mutated.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: T
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    is_stale: bool = False

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def age_seconds(self, now: datetime) -> float:
        return (now - self.observed_at).total_seconds()
