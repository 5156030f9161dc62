"""Location store with hardware-to-IP fallback.

State machine::

    NOT_STARTED -> WATCHING <-> DEGRADED -> STOPPED

``DEGRADED`` means the current reading is not hardware-trusted: either
the hardware failed (and IP geolocation may have filled in) or it
reported an accuracy worse than the threshold.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from elangdf._constants import ACCURACY_THRESHOLD_M, IP_FALLBACK_ACCURACY_M
from elangdf.config import DfConfig
from elangdf.exceptions import LocationErrorCode, LocationProviderError
from elangdf.geolocation import IpLocationProvider, select_hardware_provider
from elangdf.geolocation.base import FallbackLocationProvider, LocationFix, LocationProvider
from elangdf.geolocation.ip import SupportsIpLookup
from elangdf.models.location import LocationReading, LocationSource
from elangdf.state.events import LocationState
from elangdf.state.policy import is_trusted_accuracy, should_fall_back

_logger = logging.getLogger(__name__)

Listener = Callable[["LocationStore"], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


class LocationStore:
    """Best available operator location.

    Parameters
    ----------
    hardware
        Continuous location source (e.g. gpsd). A provider reporting
        ``available=False`` sends :meth:`start` straight to the fallback.
    fallback
        One-shot, low-confidence source (IP geolocation).
    accuracy_threshold
        Hardware fixes with a larger accuracy (metres) clear
        :attr:`has_hardware`.
    fallback_accuracy
        Accuracy (metres) attached to fallback readings.
    retry_delay
        Seconds before the hardware watch is re-entered after it failed or
        ended. A timeout is retried at once.
    """

    def __init__(
        self,
        hardware: LocationProvider,
        fallback: FallbackLocationProvider,
        *,
        accuracy_threshold: float = ACCURACY_THRESHOLD_M,
        fallback_accuracy: float = IP_FALLBACK_ACCURACY_M,
        retry_delay: float = 5.0,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._hardware = hardware
        self._fallback = fallback
        self._accuracy_threshold = accuracy_threshold
        self._fallback_accuracy = fallback_accuracy
        self._retry_delay = retry_delay
        self._clock = clock

        self.data: LocationReading | None = None
        self.error: str | None = None
        self.is_loading = False
        self.has_hardware = True

        self._phase = LocationState.NOT_STARTED
        # One IP fallback per hardware outage; re-armed by the next fix.
        self._fallback_armed = True
        self._watch: asyncio.Task[None] | None = None
        self._fallback_tasks: set[asyncio.Task[None]] = set()
        self._listeners: list[Listener] = []

    @classmethod
    def from_config(cls, config: DfConfig, client: SupportsIpLookup) -> LocationStore:
        """Build the default chain: configured hardware, then IP via *client*."""
        return cls(
            select_hardware_provider(config),
            IpLocationProvider(client),
            accuracy_threshold=config.accuracy_threshold,
            fallback_accuracy=config.ip_fallback_accuracy,
        )

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._watch is not None

    @property
    def state(self) -> LocationState:
        if self._phase != LocationState.WATCHING:
            return self._phase
        return LocationState.WATCHING if self.has_hardware else LocationState.DEGRADED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                _logger.debug("LocationStore listener failed", exc_info=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin watching hardware, or fall back at once when there is none."""
        if not self._hardware.available:
            self.error = "Geolocation not supported"
            self.has_hardware = False
            self._phase = LocationState.WATCHING
            _logger.warning("Location hardware not available, using IP fallback")
            self._notify()
            self._spawn_fallback()
            return

        if self._watch is not None:
            return

        self.is_loading = True
        self.error = None
        self.has_hardware = True
        self._fallback_armed = True
        self._phase = LocationState.WATCHING
        self._watch = asyncio.get_running_loop().create_task(self._watch_hardware(), name="location-watch")
        _logger.info("Location store started")
        self._notify()

    def stop(self) -> None:
        """Cancel the hardware watch. An IP lookup in flight still completes."""
        watch = self._watch
        if watch is not None:
            self._watch = None
            watch.cancel()
            _logger.info("Location store stopped")
        if self._phase != LocationState.NOT_STARTED:
            self._phase = LocationState.STOPPED
            self._notify()

    def clear(self) -> None:
        """Reset reading and flags; an active watch keeps running."""
        self.data = None
        self.error = None
        self.is_loading = False
        self.has_hardware = True
        self._notify()

    async def wait_for_fallback(self) -> None:
        """Wait until every IP lookup started so far has finished."""
        if self._fallback_tasks:
            await asyncio.gather(*list(self._fallback_tasks))

    # ------------------------------------------------------------------
    # Hardware path
    # ------------------------------------------------------------------

    async def _watch_hardware(self) -> None:
        """Keep the hardware watch alive until :meth:`stop` cancels it."""
        while True:
            delay = self._retry_delay
            try:
                async for fix in self._hardware.watch():
                    self._on_fix(fix)
                _logger.debug("Location stream ended, reconnecting")
            except LocationProviderError as exc:
                self._on_hardware_error(exc)
                if exc.code == LocationErrorCode.TIMEOUT:
                    delay = 0.0
            except Exception as exc:
                _logger.debug("Location watch raised", exc_info=True)
                self._on_hardware_error(
                    LocationProviderError(str(exc) or type(exc).__name__, code=LocationErrorCode.POSITION_UNAVAILABLE)
                )
            await asyncio.sleep(delay)

    def _on_fix(self, fix: LocationFix) -> None:
        accuracy = fix.accuracy if fix.accuracy is not None else self._fallback_accuracy
        self.data = LocationReading(
            lat=fix.lat,
            lon=fix.lon,
            accuracy=accuracy,
            heading=fix.heading or 0.0,
            speed=fix.speed or 0.0,
            timestamp=fix.timestamp,
            source=LocationSource.DEVICE,
        )
        self.is_loading = False
        self._fallback_armed = True
        if not is_trusted_accuracy(accuracy, self._accuracy_threshold):
            self.has_hardware = False
        self._notify()

    def _on_hardware_error(self, exc: LocationProviderError) -> None:
        _logger.error("Geolocation error: %s (%s)", exc, exc.code)
        self.error = str(exc)
        self.is_loading = False
        self.has_hardware = False
        self._notify()

        if should_fall_back(exc.code) and self._fallback_armed:
            self._fallback_armed = False
            _logger.warning("GPS unavailable (%s), falling back to IP location", exc.code)
            self._spawn_fallback()

    # ------------------------------------------------------------------
    # IP fallback
    # ------------------------------------------------------------------

    def _spawn_fallback(self) -> None:
        task = asyncio.get_running_loop().create_task(self.fallback_ip(), name="location-ip-fallback")
        self._fallback_tasks.add(task)
        task.add_done_callback(self._fallback_tasks.discard)

    async def fallback_ip(self) -> None:
        """Single IP geolocation attempt; prior data survives a failure."""
        try:
            fix = await self._fallback.locate()
        except Exception as exc:
            _logger.error("IP fallback failed: %s", exc, exc_info=True)
            self.error = f"Failed to get location: {exc}"
            self.is_loading = False
            self._notify()
            return

        self.data = LocationReading(
            lat=fix.lat,
            lon=fix.lon,
            accuracy=self._fallback_accuracy,
            heading=0.0,
            speed=0.0,
            timestamp=self._clock(),
            source=LocationSource.IP_FALLBACK,
            city=fix.city,
            country=fix.country,
        )
        self.error = None
        self.is_loading = False
        self.has_hardware = False
        _logger.info("Using IP fallback location: %s, %s", fix.city, fix.country)
        self._notify()
