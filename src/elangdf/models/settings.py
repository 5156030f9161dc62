"""Persisted user settings document."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from elangdf.models._base import DfBaseModel

COMPASS_OFFSET_KEY = "compassOffset"
GPS_LOCATION_KEY = "gpsLocation"
UTM_LOCATION_KEY = "utmLocation"

SETTINGS_KEYS: tuple[str, ...] = (COMPASS_OFFSET_KEY, GPS_LOCATION_KEY, UTM_LOCATION_KEY)


class GpsLocation(DfBaseModel):
    """Manually entered station position in decimal degrees."""

    lat: float = 0.0
    lng: float = 0.0


class UtmLocation(DfBaseModel):
    """Manually entered UTM position; all fields are kept as text.

    ``co`` is the grid (meridian) convergence value.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    zone: str = ""
    easting: str = ""
    northing: str = ""
    co: str = ""


class SettingsDocument(DfBaseModel):
    """All persisted settings, keyed by their document names."""

    compass_offset: float = 0.0
    gps_location: GpsLocation = Field(default_factory=GpsLocation)
    utm_location: UtmLocation = Field(default_factory=UtmLocation)

    @classmethod
    def defaults(cls) -> SettingsDocument:
        return cls()

    def to_document(self) -> dict[str, Any]:
        """Serialize with the on-disk (camelCase) keys."""
        return self.model_dump(by_alias=True, mode="json")
