"""High-level async client for the DF instrument API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp

from elangdf._api import compass as _compass_api
from elangdf._api import device as _device_api
from elangdf._api import df as _df_api
from elangdf._api import geolocation as _geolocation_api
from elangdf._transport import HttpTransport
from elangdf.config import DfConfig
from elangdf.exceptions import DfError
from elangdf.models.bearing import BearingReading
from elangdf.models.compass import CompassReading
from elangdf.models.device import DeviceSettings, FreqGainSettings
from elangdf.models.location import IpLocation
from elangdf.models.result import ApiResult

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class DfClient:
    """Async client for the DF instrument.

    Telemetry and settings calls never raise for device or network faults;
    they return an :class:`ApiResult` instead so polling loops can surface
    the message and retry on the next tick.

    Usage::

        async with DfClient(config) as client:
            result = await client.read_df()
            if result.success:
                print(result.data.heading)
    """

    def __init__(
        self,
        config: DfConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or DfConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    @property
    def config(self) -> DfConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DfClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise DfError("Client not initialized. Use 'async with DfClient(...) as client:'")
        return self._transport

    async def _as_result(self, fn: Callable[[HttpTransport], Awaitable[T]]) -> ApiResult[T]:
        """Run an API call, folding library errors into a failed result."""
        transport = self._require_transport()
        try:
            return ApiResult.ok(await fn(transport))
        except DfError as exc:
            _logger.debug("API call failed: %s", exc)
            return ApiResult.fail(str(exc))

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    async def read_df(self) -> ApiResult[BearingReading]:
        """Fetch the current bearing / polar sweep."""
        return await self._as_result(_df_api.read_df)

    async def read_compass(self) -> ApiResult[CompassReading]:
        """Fetch the instrument's compass heading."""
        return await self._as_result(_compass_api.read_compass)

    async def lookup_ip_location(self) -> IpLocation:
        """Resolve the host's approximate position from its public IP.

        Raises
        ------
        DfError
            On network failure or an unusable response.
        """
        transport = self._require_transport()
        return await _geolocation_api.lookup_ip_location(transport, self._config.ip_geolocation_url)

    # ------------------------------------------------------------------
    # Device settings
    # ------------------------------------------------------------------

    async def set_freq_gain(self, settings: FreqGainSettings) -> ApiResult[dict[str, Any]]:
        """Set center frequency, gain and antenna spacing."""
        return await self._as_result(lambda t: _device_api.set_freq_gain(t, settings))

    async def set_antenna(self, ant_spacing_meters: float) -> ApiResult[dict[str, Any]]:
        """Select the UHF or VHF antenna array from the element spacing."""
        return await self._as_result(lambda t: _device_api.set_antenna(t, ant_spacing_meters))

    async def set_station_id(self, station_id: str) -> ApiResult[dict[str, Any]]:
        return await self._as_result(lambda t: _device_api.set_station_id(t, station_id))

    async def get_df_settings(self) -> DeviceSettings:
        """Fetch frequency, gain and station id from the instrument.

        Unlike the other calls this raises on failure.
        """
        transport = self._require_transport()
        return await _device_api.get_settings(transport)

    # ------------------------------------------------------------------
    # Device control (fire-and-forget)
    # ------------------------------------------------------------------

    async def shutdown(self) -> None:
        """Ask the instrument to power off. Errors are logged only."""
        await self._fire(_device_api.SHUTDOWN_ENDPOINT)
        _logger.info("Turning off DF instrument")

    async def restart(self) -> None:
        """Ask the instrument to restart. Errors are logged only."""
        await self._fire(_device_api.RESTART_ENDPOINT)
        _logger.info("Restarting DF instrument")

    async def _fire(self, endpoint: str) -> None:
        transport = self._require_transport()
        try:
            await _device_api.post_command(transport, endpoint)
        except DfError:
            _logger.error("Command %s failed", endpoint, exc_info=True)
