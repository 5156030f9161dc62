#!/usr/bin/env python3
"""Watch live DF telemetry from the instrument.

Starts the bearing, compass and location stores against a real device
and prints every new reading until interrupted.

Usage
-----
Point the library at the instrument (defaults to the factory address)::

    export ELANGDF_BASE_URL="http://192.168.17.17:8087"
    python scripts/monitor.py

Options::

    --interval SECONDS   Poll interval (default: ELANGDF_POLL_INTERVAL or 1.0)
    --duration SECONDS   Stop after this many seconds (default: run forever)
    --no-location        Do not start the location store
    --json               Print one JSON object per reading
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from elangdf import (  # noqa: E402
    BearingStore,
    CompassStore,
    DfClient,
    DfConfig,
    LocationStore,
    PollingStore,
)


def _emit(kind: str, payload: dict[str, Any], *, json_mode: bool) -> None:
    stamp = datetime.now(UTC).isoformat(timespec="milliseconds")
    if json_mode:
        print(json.dumps({"time": stamp, "kind": kind, **payload}, default=str))
        return
    fields = "  ".join(f"{key}={value}" for key, value in payload.items())
    print(f"{stamp}  {kind:<8} {fields}")


def _on_bearing(json_mode: bool):
    def _listener(store: PollingStore[Any]) -> None:
        if store.is_loading:
            return
        reading = store.data
        if reading is None:
            _emit("bearing", {"error": store.error}, json_mode=json_mode)
            return
        _emit(
            "bearing",
            {
                "heading": round(reading.heading, 1),
                "peak": reading.peak_angle,
                "confidence": reading.confidence,
                "power": reading.power,
            },
            json_mode=json_mode,
        )

    return _listener


def _on_compass(json_mode: bool):
    def _listener(store: PollingStore[Any]) -> None:
        if store.is_loading:
            return
        reading = store.data
        if reading is None:
            _emit("compass", {"error": store.error}, json_mode=json_mode)
        else:
            _emit("compass", {"heading": round(reading.heading, 1)}, json_mode=json_mode)

    return _listener


def _on_location(json_mode: bool):
    def _listener(store: LocationStore) -> None:
        reading = store.data
        if reading is None:
            if store.error:
                _emit("location", {"error": store.error}, json_mode=json_mode)
            return
        _emit(
            "location",
            {
                "lat": reading.lat,
                "lon": reading.lon,
                "accuracy": reading.accuracy,
                "source": reading.source.value,
                "state": store.state.value,
            },
            json_mode=json_mode,
        )

    return _listener


async def main() -> None:
    parser = argparse.ArgumentParser(description="Print live telemetry from the DF instrument.")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds")
    parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    parser.add_argument("--no-location", action="store_true", help="Do not start the location store")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    config = DfConfig.from_env(**overrides)

    async with DfClient(config) as client:
        bearing = BearingStore.from_client(client)
        compass = CompassStore.from_client(client)
        bearing.subscribe(_on_bearing(args.json_mode))
        compass.subscribe(_on_compass(args.json_mode))

        location: LocationStore | None = None
        if not args.no_location:
            location = LocationStore.from_config(config, client)
            location.subscribe(_on_location(args.json_mode))

        bearing.start()
        compass.start()
        if location is not None:
            location.start()

        try:
            if args.duration is not None:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        finally:
            bearing.stop()
            compass.stop()
            if location is not None:
                location.stop()
                await location.wait_for_fallback()
            await bearing.wait_for_cycle()
            await compass.wait_for_cycle()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
