from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from elangdf.exceptions import DfPersistenceError
from elangdf.models.settings import GpsLocation, UtmLocation
from elangdf.persistence import JsonKeyValueStore
from elangdf.state.settings import SettingsStore


@dataclass
class _FakeBackend:
    data: dict[str, Any] = field(default_factory=dict)
    fail_get: set[str] = field(default_factory=set)
    fail_save: bool = False
    saves: int = 0

    async def get(self, key: str) -> Any | None:
        if key in self.fail_get:
            raise DfPersistenceError(f"cannot read {key}")
        return self.data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    async def save(self) -> None:
        if self.fail_save:
            raise DfPersistenceError("disk full")
        self.saves += 1

    async def clear(self) -> None:
        self.data.clear()


@pytest.mark.asyncio
async def test_failed_write_rolls_back_to_previous_value() -> None:
    backend = _FakeBackend()
    store = SettingsStore(backend)

    assert (await store.set_compass_offset(5)).success
    backend.fail_save = True
    result = await store.set_compass_offset("12")

    assert not result.success
    assert result.error == "disk full"
    assert store.compass_offset == 5.0
    assert store.error == "disk full"


@pytest.mark.asyncio
async def test_setters_coerce_and_persist_single_key() -> None:
    backend = _FakeBackend()
    store = SettingsStore(backend)

    await store.set_gps_location("-6.2", 106.8)
    await store.set_utm_location(48, 700000, 9300000.5, "M")

    assert store.gps_location == GpsLocation(lat=-6.2, lng=106.8)
    assert store.utm_location == UtmLocation(zone="48", easting="700000", northing="9300000.5", co="M")
    assert backend.data["gpsLocation"] == {"lat": -6.2, "lng": 106.8}
    assert backend.data["utmLocation"]["zone"] == "48"
    assert "compassOffset" not in backend.data
    assert backend.saves == 2


@pytest.mark.asyncio
async def test_uncontended_setter_applies_before_persisting() -> None:
    release = asyncio.Event()

    class _SlowBackend(_FakeBackend):
        async def save(self) -> None:
            await release.wait()

    store = SettingsStore(_SlowBackend())
    task = asyncio.create_task(store.set_compass_offset(7.5))
    await asyncio.sleep(0)

    assert store.compass_offset == 7.5
    release.set()
    assert (await task).success


@pytest.mark.asyncio
async def test_load_applies_defaults_for_missing_keys() -> None:
    backend = _FakeBackend(data={"compassOffset": 3.5})
    store = SettingsStore(backend)

    result = await store.load()

    assert result.success
    assert store.compass_offset == 3.5
    assert store.gps_location == GpsLocation()
    assert store.utm_location == UtmLocation()
    assert not store.is_loading


@pytest.mark.asyncio
async def test_load_fault_leaves_all_fields_untouched() -> None:
    backend = _FakeBackend(
        data={"compassOffset": 9.0, "gpsLocation": {"lat": 1.0, "lng": 2.0}},
        fail_get={"gpsLocation"},
    )
    store = SettingsStore(backend)
    await store.set_utm_location("48", "1", "2", "")

    result = await store.load()

    assert not result.success
    assert store.compass_offset == 0.0
    assert store.gps_location == GpsLocation()
    assert store.utm_location.zone == "48"
    assert store.error == "cannot read gpsLocation"
    assert not store.is_loading


@pytest.mark.asyncio
async def test_reset_keeps_defaults_even_when_clearing_fails() -> None:
    backend = _FakeBackend()
    store = SettingsStore(backend)
    await store.set_compass_offset(20)
    backend.fail_save = True

    result = await store.reset()

    assert not result.success
    assert store.compass_offset == 0.0
    assert store.all_settings.gps_location == GpsLocation()
    assert store.error == "disk full"


@pytest.mark.asyncio
async def test_json_store_round_trip_through_file(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "elangdf-config.json"
    store = SettingsStore.from_path(path)

    await store.set_compass_offset(12.5)
    await store.set_gps_location(-6.2, 106.8)

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk == {"compassOffset": 12.5, "gpsLocation": {"lat": -6.2, "lng": 106.8}}

    reloaded = SettingsStore.from_path(path)
    assert (await reloaded.load()).success
    assert reloaded.compass_offset == 12.5
    assert reloaded.gps_location.lng == 106.8

    assert (await reloaded.reset()).success
    assert json.loads(path.read_text(encoding="utf-8")) == {}


@pytest.mark.asyncio
async def test_json_store_reverts_unsaved_edits_on_write_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    backend = JsonKeyValueStore(tmp_path / "settings.json")
    await backend.set("compassOffset", 1.0)
    await backend.save()

    def _boom(*_args: Any, **_kwargs: Any) -> None:
        raise OSError("read-only file system")

    monkeypatch.setattr("elangdf.persistence._write_document", _boom)
    await backend.set("compassOffset", 2.0)
    with pytest.raises(DfPersistenceError):
        await backend.save()

    assert await backend.get("compassOffset") == 1.0


@pytest.mark.asyncio
async def test_json_store_corrupt_file_is_a_persistence_error(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    store = SettingsStore(JsonKeyValueStore(path))

    result = await store.load()

    assert not result.success
    assert store.error is not None and "Failed to read" in store.error


@dataclass
class _OsErrorBackend(_FakeBackend):
    """Backend surfacing raw OS errors instead of library errors."""

    def _raise(self) -> None:
        raise OSError("io error")

    async def get(self, key: str) -> Any | None:
        if self.fail_get:
            self._raise()
        return await super().get(key)

    async def save(self) -> None:
        if self.fail_save:
            self._raise()
        await super().save()


@pytest.mark.asyncio
async def test_foreign_backend_errors_are_captured_and_rolled_back() -> None:
    backend = _OsErrorBackend()
    store = SettingsStore(backend)
    await store.set_compass_offset(5)

    backend.fail_save = True
    failed_set = await store.set_compass_offset(12)
    failed_reset = await store.reset()

    assert not failed_set.success and failed_set.error == "io error"
    assert not failed_reset.success
    assert store.compass_offset == 0.0

    backend.fail_save = False
    await store.set_compass_offset(5)
    backend.fail_get = {"compassOffset"}
    failed_load = await store.load()

    assert not failed_load.success
    assert store.compass_offset == 5.0
    assert not store.is_loading
    assert store.error == "io error"
