"""Optimistic persisted settings store.

Setters apply to memory first and persist afterwards; a failed write
restores the previous value. ``reset()`` is deliberately asymmetric: the
defaults stay in memory even when clearing the file fails.

All operations that touch the backend are serialized by a single
``asyncio.Lock``, so a ``load()`` can never interleave with a setter's
write. When the lock is free a setter's in-memory update happens before
its first suspension point.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from elangdf.config import DfConfig
from elangdf.models.result import ApiResult
from elangdf.models.settings import (
    COMPASS_OFFSET_KEY,
    GPS_LOCATION_KEY,
    SETTINGS_KEYS,
    UTM_LOCATION_KEY,
    GpsLocation,
    SettingsDocument,
    UtmLocation,
)
from elangdf.persistence import JsonKeyValueStore, KeyValueStore

_logger = logging.getLogger(__name__)

Listener = Callable[["SettingsStore"], None]


class SettingsStore:
    """In-memory settings mirrored to a key-value document.

    The three fields are independently settable, but :meth:`load` treats
    them as one group: either all are replaced or none is.
    """

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend
        self._lock = asyncio.Lock()
        self._listeners: list[Listener] = []

        defaults = SettingsDocument.defaults()
        self.compass_offset: float = defaults.compass_offset
        self.gps_location: GpsLocation = defaults.gps_location
        self.utm_location: UtmLocation = defaults.utm_location

        self._is_loading = False
        self._error: str | None = None

    @classmethod
    def from_path(cls, path: Path | str) -> SettingsStore:
        return cls(JsonKeyValueStore(path))

    @classmethod
    def from_config(cls, config: DfConfig) -> SettingsStore:
        return cls.from_path(config.settings_path)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def all_settings(self) -> SettingsDocument:
        return SettingsDocument(
            compass_offset=self.compass_offset,
            gps_location=self.gps_location,
            utm_location=self.utm_location,
        )

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
                _logger.debug("SettingsStore listener failed", exc_info=True)

    # ------------------------------------------------------------------
    # Load / reset
    # ------------------------------------------------------------------

    async def load(self) -> ApiResult[SettingsDocument]:
        """Read all keys, applying defaults for absent ones."""
        async with self._lock:
            self._is_loading = True
            self._error = None
            self._notify()

            try:
                raw: dict[str, Any] = {}
                for key in SETTINGS_KEYS:
                    value = await self._backend.get(key)
                    if value is not None:
                        raw[key] = value
                document = SettingsDocument.model_validate(raw)
            except Exception as exc:
                _logger.error("Failed to load settings: %s", exc, exc_info=True)
                self._error = str(exc)
                self._is_loading = False
                self._notify()
                return ApiResult.fail(str(exc))

            self.compass_offset = document.compass_offset
            self.gps_location = document.gps_location
            self.utm_location = document.utm_location
            self._is_loading = False
            _logger.info("Settings loaded: %s", document.to_document())
            self._notify()
            return ApiResult.ok(document)

    async def reset(self) -> ApiResult[None]:
        """Restore defaults in memory, then clear the persisted document."""
        async with self._lock:
            defaults = SettingsDocument.defaults()
            self.compass_offset = defaults.compass_offset
            self.gps_location = defaults.gps_location
            self.utm_location = defaults.utm_location
            self._notify()

            try:
                await self._backend.clear()
                await self._backend.save()
            except Exception as exc:
                _logger.error("Failed to reset settings: %s", exc, exc_info=True)
                self._error = str(exc)
                self._notify()
                return ApiResult.fail(str(exc))

            _logger.info("Settings reset to defaults")
            return ApiResult.ok()

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    async def set_compass_offset(self, value: float | str) -> ApiResult[None]:
        offset = float(value)
        return await self._optimistic_set(COMPASS_OFFSET_KEY, "compass_offset", offset, offset)

    async def set_gps_location(self, lat: float | str, lng: float | str) -> ApiResult[None]:
        location = GpsLocation(lat=float(lat), lng=float(lng))
        return await self._optimistic_set(GPS_LOCATION_KEY, "gps_location", location, location.model_dump())

    async def set_utm_location(
        self,
        zone: Any,
        easting: Any,
        northing: Any,
        co: Any,
    ) -> ApiResult[None]:
        location = UtmLocation(zone=str(zone), easting=str(easting), northing=str(northing), co=str(co))
        return await self._optimistic_set(UTM_LOCATION_KEY, "utm_location", location, location.model_dump())

    async def _optimistic_set(self, key: str, attr: str, value: Any, stored: Any) -> ApiResult[None]:
        async with self._lock:
            previous = getattr(self, attr)
            setattr(self, attr, value)
            self._notify()

            try:
                await self._backend.set(key, stored)
                await self._backend.save()
            except Exception as exc:
                setattr(self, attr, previous)
                self._error = str(exc)
                _logger.error("Failed to save %s, reverting to %r", key, previous, exc_info=True)
                self._notify()
                return ApiResult.fail(str(exc))

            _logger.info("%s saved: %r", key, stored)
            return ApiResult.ok()

