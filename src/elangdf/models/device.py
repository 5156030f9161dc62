"""Device-side DF settings."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, field_validator

from elangdf._normalize import safe_float, safe_str
from elangdf.models._base import DfBaseModel


class DeviceSettings(DfBaseModel):
    """Subset of ``GET /api/settings`` the companion cares about."""

    model_config = ConfigDict(alias_generator=None)

    center_freq: float | None = None
    uniform_gain: float | None = None
    station_id: str | None = None

    @field_validator("center_freq", "uniform_gain", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("station_id", mode="before")
    @classmethod
    def _coerce_station_id(cls, value: Any) -> str | None:
        return safe_str(value)


class FreqGainSettings(DfBaseModel):
    """Body of ``POST /api/settings/freq``."""

    model_config = ConfigDict(alias_generator=None)

    center_freq: float
    uniform_gain: float
    ant_spacing_meters: float

    def to_payload(self) -> dict[str, float]:
        return self.model_dump()
