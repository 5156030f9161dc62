"""elangdf - Async Python companion library for an ELANG direction-finding instrument."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyelangdf")
except PackageNotFoundError:
    __version__ = "0+local"
from elangdf.client import DfClient
from elangdf.config import DfConfig
from elangdf.coords import (
    DmsComponents,
    ValidationResult,
    decimal_to_dms,
    dms_to_decimal,
    parse_dms,
    validate_decimal,
    validate_dms,
)
from elangdf.exceptions import (
    DfConfigError,
    DfError,
    DfParseError,
    DfPersistenceError,
    DfTransportError,
    LocationErrorCode,
    LocationProviderError,
)
from elangdf.models import (
    ApiResult,
    BearingReading,
    CompassReading,
    DeviceSettings,
    FreqGainSettings,
    GpsLocation,
    IpLocation,
    LocationReading,
    LocationSource,
    SettingsDocument,
    UtmLocation,
)
from elangdf.persistence import JsonKeyValueStore, KeyValueStore
from elangdf.state.bearing import BearingStore
from elangdf.state.events import LocationState, PollingStatus, TelemetrySnapshot
from elangdf.state.location import LocationStore
from elangdf.state.polling import CompassStore, PollingStore
from elangdf.state.settings import SettingsStore
from elangdf.state.signal import SignalState
from elangdf.udp import UdpNumberLink

__all__ = [
    "__version__",
    "ApiResult",
    "BearingReading",
    "BearingStore",
    "CompassReading",
    "CompassStore",
    "DeviceSettings",
    "DfClient",
    "DfConfig",
    "DfConfigError",
    "DfError",
    "DfParseError",
    "DfPersistenceError",
    "DfTransportError",
    "DmsComponents",
    "FreqGainSettings",
    "GpsLocation",
    "IpLocation",
    "JsonKeyValueStore",
    "KeyValueStore",
    "LocationErrorCode",
    "LocationProviderError",
    "LocationReading",
    "LocationSource",
    "LocationState",
    "LocationStore",
    "PollingStatus",
    "PollingStore",
    "SettingsDocument",
    "SettingsStore",
    "SignalState",
    "TelemetrySnapshot",
    "UdpNumberLink",
    "UtmLocation",
    "ValidationResult",
    "decimal_to_dms",
    "dms_to_decimal",
    "parse_dms",
    "validate_decimal",
    "validate_dms",
]
