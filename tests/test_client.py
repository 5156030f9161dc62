from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from elangdf import client as client_module
from elangdf._transport import HttpTransport, RawResponse
from elangdf.client import DfClient
from elangdf.config import DfConfig
from elangdf.exceptions import DfError, DfTransportError
from elangdf.geolocation.ip import IpLocationProvider
from elangdf.models.device import FreqGainSettings

BASE = "http://df.test"


@dataclass
class _FakeTransport:
    """Answers requests from a ``(method, url) -> (status, body)`` table."""

    routes: dict[tuple[str, str], tuple[int, str]]
    calls: list[tuple[str, str, Mapping[str, Any] | None]] = field(default_factory=list)

    def url(self, endpoint: str) -> str:
        if endpoint.startswith("http"):
            return endpoint
        return f"{BASE}{endpoint}"

    async def request(self, method: str, url: str, *, json_body: Mapping[str, Any] | None = None) -> RawResponse:
        self.calls.append((method, url, json_body))
        route = self.routes.get((method, url))
        if route is None:
            raise DfTransportError(f"Request to {url} failed: connection refused", endpoint=url)
        status, body = route
        return RawResponse(status, body, url)


def _install(monkeypatch: pytest.MonkeyPatch, transport: _FakeTransport) -> None:
    monkeypatch.setattr(client_module, "HttpTransport", lambda _config, _session: transport)


def _df_body(token: str = "T1", heading: str = "90") -> str:
    return ",".join([token, heading, "1", "2"] + ["0"] * 13 + ["1"] * 360)


@pytest.mark.asyncio
async def test_read_df_success(monkeypatch: pytest.MonkeyPatch) -> None:
    transport = _FakeTransport({("GET", f"{BASE}/df"): (200, _df_body())})
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        result = await client.read_df()

    assert result.success
    assert result.data.heading == 270.0


@pytest.mark.asyncio
async def test_read_df_errors_become_results(monkeypatch: pytest.MonkeyPatch) -> None:
    transport = _FakeTransport({("GET", f"{BASE}/df"): (500, "boom")})
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        http_error = await client.read_df()
        transport.routes[("GET", f"{BASE}/df")] = (200, "T1,2,3")
        short = await client.read_df()

    assert http_error.error == "HTTP 500"
    assert short.error == "DF data is incomplete"


@pytest.mark.asyncio
async def test_read_compass_error_includes_body(monkeypatch: pytest.MonkeyPatch) -> None:
    transport = _FakeTransport({("GET", f"{BASE}/api/compass"): (503, "sensor offline")})
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        failed = await client.read_compass()
        transport.routes[("GET", f"{BASE}/api/compass")] = (200, '{"heading": "181.5"}')
        ok = await client.read_compass()

    assert failed.error == "HTTP 503: sensor offline"
    assert ok.data.heading == 181.5


@pytest.mark.asyncio
@pytest.mark.parametrize(("spacing", "band"), [(0.25, "uhf"), (0.1, "uhf"), (0.26, "vhf"), (1.0, "vhf")])
async def test_set_antenna_selects_band(monkeypatch: pytest.MonkeyPatch, spacing: float, band: str) -> None:
    transport = _FakeTransport({("GET", f"{BASE}/api/ant/{band}"): (200, '{"status": "ok"}')})
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        result = await client.set_antenna(spacing)

    assert result.success
    assert result.data == {"status": "ok"}


@pytest.mark.asyncio
async def test_exact_200_endpoints_report_status_and_body(monkeypatch: pytest.MonkeyPatch) -> None:
    transport = _FakeTransport(
        {
            ("GET", f"{BASE}/api/ant/vhf"): (201, "created?"),
            ("POST", f"{BASE}/api/settings/station_id"): (400, "bad id"),
        }
    )
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        antenna = await client.set_antenna(0.5)
        station = await client.set_station_id("ST-01")

    assert antenna.error == "201: created?"
    assert station.error == "400: bad id"
    assert transport.calls[-1][2] == {"id": "ST-01"}


@pytest.mark.asyncio
async def test_set_freq_gain_posts_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    transport = _FakeTransport({("POST", f"{BASE}/api/settings/freq"): (200, '{"applied": true}')})
    _install(monkeypatch, transport)

    settings = FreqGainSettings(center_freq=433.92, uniform_gain=20.7, ant_spacing_meters=0.3)
    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        result = await client.set_freq_gain(settings)

    assert result.success
    assert transport.calls[0][2] == {"center_freq": 433.92, "uniform_gain": 20.7, "ant_spacing_meters": 0.3}


@pytest.mark.asyncio
async def test_get_df_settings_keeps_three_fields_and_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    body = '{"center_freq": 145.5, "uniform_gain": "30", "station_id": "ST-01", "secret": "x"}'
    transport = _FakeTransport({("GET", f"{BASE}/api/settings"): (200, body)})
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        settings = await client.get_df_settings()
        assert settings.model_dump() == {"center_freq": 145.5, "uniform_gain": 30.0, "station_id": "ST-01"}

        transport.routes[("GET", f"{BASE}/api/settings")] = (500, "down")
        with pytest.raises(DfTransportError):
            await client.get_df_settings()


@pytest.mark.asyncio
async def test_control_commands_never_raise(monkeypatch: pytest.MonkeyPatch) -> None:
    transport = _FakeTransport({("POST", f"{BASE}/api/restart"): (200, "")})
    _install(monkeypatch, transport)

    async with DfClient(DfConfig(base_url=BASE), session=object()) as client:  # type: ignore[arg-type]
        await client.restart()
        await client.shutdown()

    assert [call[1] for call in transport.calls] == [f"{BASE}/api/restart", f"{BASE}/api/shutdown"]


@pytest.mark.asyncio
async def test_ip_lookup_feeds_fallback_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    url = "https://geo.test/json/"
    body = '{"latitude": -6.2, "longitude": 106.8, "city": "Jakarta", "country_name": "Indonesia"}'
    transport = _FakeTransport({("GET", url): (200, body)})
    _install(monkeypatch, transport)

    config = DfConfig(base_url=BASE, ip_geolocation_url=url)
    async with DfClient(config, session=object()) as client:  # type: ignore[arg-type]
        fix = await IpLocationProvider(client).locate()

        transport.routes[("GET", url)] = (200, '{"error": true, "reason": "RateLimited"}')
        with pytest.raises(DfError, match="RateLimited"):
            await client.lookup_ip_location()

    assert (fix.lat, fix.lon, fix.city, fix.country) == (-6.2, 106.8, "Jakarta", "Indonesia")
    assert fix.accuracy is None


@pytest.mark.asyncio
async def test_calls_require_context_manager() -> None:
    client = DfClient(DfConfig(base_url=BASE))

    with pytest.raises(DfError, match="not initialized"):
        await client.read_df()


def test_raw_response_invalid_json() -> None:
    with pytest.raises(DfTransportError) as excinfo:
        RawResponse(200, "<html>", "http://df.test/api/compass").json()

    assert excinfo.value.status_code == 200


class _BinaryResponse:
    status = 200

    async def __aenter__(self) -> _BinaryResponse:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def text(self) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")


class _BinarySession:
    def request(self, method: str, url: str, **kwargs: Any) -> _BinaryResponse:
        return _BinaryResponse()


@pytest.mark.asyncio
async def test_undecodable_body_is_a_transport_error() -> None:
    transport = HttpTransport(DfConfig(base_url=BASE), _BinarySession())  # type: ignore[arg-type]

    with pytest.raises(DfTransportError, match="Undecodable response") as excinfo:
        await transport.request("GET", transport.url("/api/df"))

    assert excinfo.value.endpoint == f"{BASE}/api/df"
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
