"""IP geolocation fallback provider."""

from __future__ import annotations

import logging
from typing import Protocol

from elangdf.geolocation.base import LocationFix
from elangdf.models.location import IpLocation

_logger = logging.getLogger(__name__)


class SupportsIpLookup(Protocol):
    async def lookup_ip_location(self) -> IpLocation:
        ...


class IpLocationProvider:
    """Resolve an approximate position from the host's public IP.

    The fix carries no accuracy; the location store assigns its fixed
    low-confidence value.
    """

    def __init__(self, client: SupportsIpLookup) -> None:
        self._client = client

    async def locate(self) -> LocationFix:
        _logger.info("Fetching IP-based location")
        result = await self._client.lookup_ip_location()
        return LocationFix(
            lat=result.latitude,
            lon=result.longitude,
            city=result.city,
            country=result.country_name,
        )
