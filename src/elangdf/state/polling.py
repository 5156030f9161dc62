"""Generic timer-driven polling store.

A :class:`PollingStore` owns one fetch cycle, the latest snapshot, a
status/error pair and a repeating timer. The timer task's existence is the
only definition of "running".

Overlapping cycles: a tick that fires while the previous cycle is still
awaiting the fetcher is skipped, so at most one timer-driven cycle is in
flight. ``stop()`` only prevents new cycles; an in-flight cycle finishes
and may still publish its result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from elangdf._constants import DEFAULT_POLL_INTERVAL
from elangdf.client import DfClient
from elangdf.models.compass import CompassReading
from elangdf.models.result import ApiResult
from elangdf.state.events import PollingStatus, TelemetrySnapshot
from elangdf.state.policy import is_stale_age

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[[], Awaitable[ApiResult[T]]]
Listener = Callable[["PollingStore[Any]"], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PollingStore(Generic[T]):
    """Periodically invoke *fetcher* and expose the latest result.

    Parameters
    ----------
    fetcher
        Zero-argument coroutine function returning an :class:`ApiResult`.
        Raised exceptions are treated like failed results.
    interval
        Seconds between cycles.
    stale_after
        Age in seconds after which :attr:`snapshot` is flagged stale.
        Defaults to three intervals; pass ``math.inf`` to disable the flag.
    name
        Label used in log messages.
    clock
        Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        fetcher: Fetcher[T],
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        stale_after: float | None = None,
        name: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._fetcher = fetcher
        self._interval = interval
        self._stale_after = interval * 3 if stale_after is None else stale_after
        self._name = name or type(self).__name__
        self._clock = clock

        self._snapshot: TelemetrySnapshot[T] | None = None
        self._status = PollingStatus.IDLE
        self._error: str | None = None

        self._timer: asyncio.Task[None] | None = None
        self._in_flight: asyncio.Task[ApiResult[T]] | None = None
        self._cycles: set[asyncio.Task[ApiResult[T]]] = set()
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def status(self) -> PollingStatus:
        return self._status

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._status == PollingStatus.LOADING

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    @property
    def snapshot(self) -> TelemetrySnapshot[T] | None:
        """Latest snapshot, flagged stale when older than ``stale_after``."""
        snapshot = self._snapshot
        if snapshot is None:
            return None
        stale = is_stale_age(snapshot.age_seconds(self._clock()), self._stale_after)
        if stale != snapshot.is_stale:
            return snapshot.model_copy(update={"is_stale": stale})
        return snapshot

    @property
    def data(self) -> T | None:
        snapshot = self._snapshot
        return snapshot.value if snapshot is not None else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every state change; returns an unsubscribe function."""
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
                _logger.debug("%s listener failed", self._name, exc_info=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Fetch now, then every ``interval`` seconds. No-op when running.

        Must be called from a running event loop.
        """
        if self._timer is not None:
            return

        loop = asyncio.get_running_loop()
        self._spawn_cycle()
        self._timer = loop.create_task(self._run_timer(), name=f"{self._name}-timer")
        _logger.info("%s started", self._name)

    def stop(self) -> None:
        """Cancel the timer. Cached data is kept."""
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        timer.cancel()
        _logger.info("%s stopped", self._name)

    def clear(self) -> None:
        """Reset snapshot, status and error without touching the timer."""
        self._snapshot = None
        self._status = PollingStatus.IDLE
        self._error = None
        self._notify()

    async def wait_for_cycle(self) -> ApiResult[T] | None:
        """Wait for the most recently spawned cycle, if any, to finish."""
        task = self._in_flight
        if task is None:
            return None
        return await asyncio.shield(task)

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            in_flight = self._in_flight
            if in_flight is not None and not in_flight.done():
                _logger.debug("%s: previous cycle still running, skipping tick", self._name)
                continue
            self._spawn_cycle()

    def _spawn_cycle(self) -> None:
        task = asyncio.get_running_loop().create_task(self.fetch(), name=f"{self._name}-fetch")
        self._in_flight = task
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------

    async def fetch(self) -> ApiResult[T]:
        """Run one cycle and publish its outcome.

        A failed cycle never raises and never stops the timer; the next
        tick simply tries again.
        """
        self._status = PollingStatus.LOADING
        self._error = None
        self._notify()

        try:
            result = await self._fetcher()
        except Exception as exc:
            _logger.debug("%s fetch raised", self._name, exc_info=True)
            message = str(exc) or type(exc).__name__
            self._publish_failure(message)
            return ApiResult.fail(message)

        if result.success:
            self._publish_success(result.data)
        else:
            self._publish_failure(result.error or "Unknown error")
        return result

    def _publish_success(self, value: Any) -> None:
        self._snapshot = TelemetrySnapshot(value=value, observed_at=self._clock())
        self._status = PollingStatus.READY
        self._notify()

    def _publish_failure(self, message: str) -> None:
        _logger.debug("%s cycle failed: %s", self._name, message)
        self._snapshot = None
        self._error = message
        self._status = PollingStatus.ERRORED
        self._notify()


class CompassStore(PollingStore[CompassReading]):
    """Polling store for the instrument's compass heading."""

    @classmethod
    def from_client(cls, client: DfClient, **kwargs: Any) -> CompassStore:
        kwargs.setdefault("interval", client.config.poll_interval)
        return cls(client.read_compass, **kwargs)
