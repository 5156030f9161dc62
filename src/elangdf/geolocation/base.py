"""Location provider abstraction.

A provider either streams fixes (hardware) or answers a single lookup
(network). Hardware providers expose :meth:`LocationProvider.watch`, an
async iterator that is cancelled by cancelling the task consuming it.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol

from elangdf.exceptions import LocationErrorCode, LocationProviderError


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class LocationFix:
    """A raw position fix before the store applies its trust rules."""

    lat: float
    lon: float
    accuracy: float | None = None
    heading: float | None = None
    speed: float | None = None
    timestamp: int = field(default_factory=_now_ms)
    city: str | None = None
    country: str | None = None


class LocationProvider(Protocol):
    """Continuous (hardware) location source."""

    @property
    def available(self) -> bool:
        """Whether the platform offers this capability at all."""
        ...

    def watch(self) -> AsyncIterator[LocationFix]:
        ...


class FallbackLocationProvider(Protocol):
    """One-shot, low-confidence location source."""

    async def locate(self) -> LocationFix:
        ...


class NullLocationProvider:
    """Stands in for platforms without location hardware."""

    @property
    def available(self) -> bool:
        return False

    async def watch(self) -> AsyncIterator[LocationFix]:
        raise LocationProviderError(
            "Geolocation not supported",
            code=LocationErrorCode.POSITION_UNAVAILABLE,
        )
        yield  # pragma: no cover
