"""Location models."""

from __future__ import annotations

import time
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from elangdf._constants import ACCURACY_THRESHOLD_M
from elangdf._normalize import safe_float, safe_str
from elangdf.models._base import DfBaseModel


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class LocationSource(StrEnum):
    DEVICE = "device"
    IP_FALLBACK = "ip_fallback"


class LocationReading(DfBaseModel):
    """Best-known operator location.

    Parameters
    ----------
    lat, lon : float
        Position in decimal degrees.
    accuracy : float
        Horizontal accuracy in metres (larger is worse).
    heading : float
        Course over ground in degrees; ``0`` when unknown.
    speed : float
        Speed in m/s; ``0`` when unknown.
    timestamp : int
        Epoch milliseconds of the fix.
    source : LocationSource
        Which link in the fallback chain produced the fix.
    city, country : str or None
        Only populated by IP geolocation.
    """

    lat: float
    lon: float
    accuracy: float
    heading: float = 0.0
    speed: float = 0.0
    timestamp: int = Field(default_factory=_now_ms)
    source: LocationSource = LocationSource.DEVICE
    city: str | None = None
    country: str | None = None

    def is_degraded(self, threshold: float = ACCURACY_THRESHOLD_M) -> bool:
        """Whether the fix should be shown with reduced confidence."""
        return self.source == LocationSource.IP_FALLBACK or self.accuracy > threshold


class IpLocation(DfBaseModel):
    """Response of the IP geolocation lookup."""

    latitude: float
    longitude: float
    city: str | None = None
    country_name: str | None = Field(default=None, validation_alias=AliasChoices("country_name", "countryName"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"coordinate is not numeric: {value!r}")
        return parsed

    @field_validator("city", "country_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return safe_str(value)
