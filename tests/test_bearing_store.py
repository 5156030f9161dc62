from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from elangdf.models.bearing import BearingReading
from elangdf.models.result import ApiResult
from elangdf.state.bearing import BearingStore
from elangdf.state.events import PollingStatus


def _reading(token: str, heading: float = 10.0) -> BearingReading:
    return BearingReading(timestamp=token, heading=heading, polar=tuple([0.0] * 360))


@dataclass
class _Queue:
    results: list[Any]
    calls: int = 0

    async def __call__(self) -> ApiResult[BearingReading]:
        outcome = self.results[self.calls]
        self.calls += 1
        return outcome


@pytest.mark.asyncio
async def test_repeated_token_is_no_new_data() -> None:
    store = BearingStore(_Queue([ApiResult.ok(_reading("T1")), ApiResult.ok(_reading("T1"))]))

    await store.fetch()
    assert store.data is not None
    assert store.last_timestamp == "T1"

    await store.fetch()
    assert store.data is None
    assert store.error == "No new data available"
    assert store.is_stale
    assert store.status == PollingStatus.READY
    assert store.last_timestamp == "T1"


@pytest.mark.asyncio
async def test_new_token_after_duplicate_is_accepted() -> None:
    store = BearingStore(
        _Queue([ApiResult.ok(_reading("T1")), ApiResult.ok(_reading("T1")), ApiResult.ok(_reading("T2", 45.0))])
    )

    for _ in range(3):
        await store.fetch()

    assert store.data is not None and store.data.heading == 45.0
    assert store.error is None
    assert not store.is_stale
    assert store.last_timestamp == "T2"


@pytest.mark.asyncio
async def test_transport_failure_keeps_last_token() -> None:
    store = BearingStore(
        _Queue([ApiResult.ok(_reading("T1")), ApiResult.fail("HTTP 503"), ApiResult.ok(_reading("T1"))])
    )

    await store.fetch()
    await store.fetch()
    assert store.status == PollingStatus.ERRORED
    assert store.error == "HTTP 503"
    assert store.last_timestamp == "T1"

    # Same sweep after recovery is still recognised as old.
    await store.fetch()
    assert store.data is None
    assert store.error == "No new data available"


@pytest.mark.asyncio
async def test_clear_forgets_token() -> None:
    store = BearingStore(_Queue([ApiResult.ok(_reading("T1")), ApiResult.ok(_reading("T1"))]))

    await store.fetch()
    store.clear()
    await store.fetch()

    assert store.last_timestamp == "T1"
    assert store.data is not None
    assert store.status == PollingStatus.READY
