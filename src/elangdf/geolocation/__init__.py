"""Location providers for the fallback chain: hardware first, IP second."""

from __future__ import annotations

from elangdf.config import DfConfig
from elangdf.geolocation.base import (
    FallbackLocationProvider,
    LocationFix,
    LocationProvider,
    NullLocationProvider,
)
from elangdf.geolocation.gpsd_client import GpsdLocationProvider
from elangdf.geolocation.ip import IpLocationProvider


def select_hardware_provider(config: DfConfig) -> LocationProvider:
    """Pick the hardware provider for this host."""
    if config.gpsd_enabled:
        return GpsdLocationProvider(
            host=config.gpsd_host,
            port=config.gpsd_port,
            timeout=config.gpsd_timeout,
        )
    return NullLocationProvider()


__all__ = [
    "FallbackLocationProvider",
    "GpsdLocationProvider",
    "IpLocationProvider",
    "LocationFix",
    "LocationProvider",
    "NullLocationProvider",
    "select_hardware_provider",
]
