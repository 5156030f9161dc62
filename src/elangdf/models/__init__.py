"""Data models for elangdf."""

from elangdf.models._base import DfBaseModel
from elangdf.models.bearing import BearingReading
from elangdf.models.compass import CompassReading
from elangdf.models.device import DeviceSettings, FreqGainSettings
from elangdf.models.location import IpLocation, LocationReading, LocationSource
from elangdf.models.result import ApiResult
from elangdf.models.settings import GpsLocation, SettingsDocument, UtmLocation

__all__ = [
    "ApiResult",
    "BearingReading",
    "CompassReading",
    "DeviceSettings",
    "DfBaseModel",
    "FreqGainSettings",
    "GpsLocation",
    "IpLocation",
    "LocationReading",
    "LocationSource",
    "SettingsDocument",
    "UtmLocation",
]
