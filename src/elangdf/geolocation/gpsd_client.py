"""Hardware location through a local gpsd daemon.

Uses the ``gpsd-py3`` client: ``gpsd.connect()`` once, then
``gpsd.get_current()`` polls the daemon for its latest TPV report. The
client is blocking, so every call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from datetime import datetime
from types import ModuleType
from typing import Any

import gpsd

from elangdf._constants import GPSD_HOST, GPSD_PORT
from elangdf._normalize import safe_float
from elangdf.exceptions import LocationErrorCode, LocationProviderError
from elangdf.geolocation.base import LocationFix

_logger = logging.getLogger(__name__)


def _parse_time_ms(value: Any) -> int | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return int(parsed.timestamp() * 1000)


def fix_from_packet(packet: Any) -> LocationFix | None:
    """Turn a ``gpsd.GpsResponse`` into a fix, or ``None`` without a 2D/3D fix."""
    if (safe_float(getattr(packet, "mode", 0)) or 0) < 2:
        return None

    lat = safe_float(getattr(packet, "lat", None))
    lon = safe_float(getattr(packet, "lon", None))
    if lat is None or lon is None:
        return None

    # gpsd-py3 reports missing error estimates as 0.
    error = getattr(packet, "error", None) or {}
    axes = [safe_float(error.get(axis)) for axis in ("x", "y")]
    axes = [value for value in axes if value]
    accuracy = max(axes) if axes else None

    fix_kwargs: dict[str, Any] = {
        "lat": lat,
        "lon": lon,
        "accuracy": accuracy,
        "heading": safe_float(getattr(packet, "track", None)),
        "speed": safe_float(getattr(packet, "hspeed", None)),
    }
    timestamp = _parse_time_ms(getattr(packet, "time", None))
    if timestamp is not None:
        fix_kwargs["timestamp"] = timestamp
    return LocationFix(**fix_kwargs)


class GpsdLocationProvider:
    """Stream fixes from gpsd by polling it.

    Parameters
    ----------
    host, port
        gpsd address.
    timeout
        Seconds without a usable fix before the stream fails with
        ``TIMEOUT``. Connection failures map to ``POSITION_UNAVAILABLE``
        and permission failures to ``PERMISSION_DENIED``.
    poll_interval
        Seconds between ``get_current()`` polls.
    client
        Module implementing the gpsd-py3 API; the real ``gpsd`` by default.
    """

    def __init__(
        self,
        host: str = GPSD_HOST,
        port: int = GPSD_PORT,
        *,
        timeout: float = 10.0,
        poll_interval: float = 1.0,
        client: ModuleType | Any = gpsd,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._client = client

    @property
    def available(self) -> bool:
        return True

    async def _connect(self) -> None:
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._client.connect, host=self._host, port=self._port),
                self._timeout,
            )
        except PermissionError as exc:
            raise LocationProviderError(
                f"Permission denied connecting to gpsd: {exc}",
                code=LocationErrorCode.PERMISSION_DENIED,
            ) from exc
        except (OSError, TimeoutError) as exc:
            raise LocationProviderError(
                f"gpsd unavailable at {self._host}:{self._port}: {exc}",
                code=LocationErrorCode.POSITION_UNAVAILABLE,
            ) from exc

    async def _poll(self) -> Any | None:
        try:
            return await asyncio.to_thread(self._client.get_current)
        except UserWarning:
            # Raised by gpsd-py3 while the receiver is not active yet.
            return None
        except (OSError, ValueError, KeyError) as exc:
            raise LocationProviderError(
                f"gpsd connection lost: {exc}",
                code=LocationErrorCode.POSITION_UNAVAILABLE,
            ) from exc

    async def watch(self) -> AsyncIterator[LocationFix]:
        await self._connect()
        _logger.info("Connected to gpsd at %s:%d", self._host, self._port)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout
        while True:
            packet = await self._poll()
            fix = fix_from_packet(packet) if packet is not None else None
            if fix is not None:
                deadline = loop.time() + self._timeout
                yield fix
            elif loop.time() >= deadline:
                raise LocationProviderError("Timed out waiting for a GPS fix", code=LocationErrorCode.TIMEOUT)
            await asyncio.sleep(self._poll_interval)
