"""Device control and settings endpoints.

Endpoints:
  - POST /api/shutdown
  - POST /api/restart
  - POST /api/settings/freq        {center_freq, uniform_gain, ant_spacing_meters}
  - GET  /api/ant/{vhf|uhf}
  - POST /api/settings/station_id  {id}
  - GET  /api/settings
"""

from __future__ import annotations

import logging
from typing import Any

from elangdf._api._common import json_object, raise_for_status
from elangdf._constants import antenna_band
from elangdf._transport import Transport
from elangdf.models.device import DeviceSettings, FreqGainSettings

_logger = logging.getLogger(__name__)

SHUTDOWN_ENDPOINT = "/api/shutdown"
RESTART_ENDPOINT = "/api/restart"
FREQ_ENDPOINT = "/api/settings/freq"
STATION_ID_ENDPOINT = "/api/settings/station_id"
SETTINGS_ENDPOINT = "/api/settings"


def antenna_endpoint(ant_spacing_meters: float) -> str:
    return f"/api/ant/{antenna_band(ant_spacing_meters)}"


async def set_freq_gain(transport: Transport, settings: FreqGainSettings) -> dict[str, Any]:
    response = await transport.request(
        "POST",
        transport.url(FREQ_ENDPOINT),
        json_body=settings.to_payload(),
    )
    raise_for_status(response, FREQ_ENDPOINT)
    return json_object(response, FREQ_ENDPOINT)


async def set_antenna(transport: Transport, ant_spacing_meters: float) -> dict[str, Any]:
    endpoint = antenna_endpoint(ant_spacing_meters)
    response = await transport.request("GET", transport.url(endpoint))
    raise_for_status(response, endpoint, exact_200=True)
    return json_object(response, endpoint)


async def set_station_id(transport: Transport, station_id: str) -> dict[str, Any]:
    response = await transport.request(
        "POST",
        transport.url(STATION_ID_ENDPOINT),
        json_body={"id": station_id},
    )
    raise_for_status(response, STATION_ID_ENDPOINT, exact_200=True)
    return json_object(response, STATION_ID_ENDPOINT)


async def get_settings(transport: Transport) -> DeviceSettings:
    """Fetch device settings, keeping only frequency, gain and station id."""
    response = await transport.request("GET", transport.url(SETTINGS_ENDPOINT))
    raise_for_status(response, SETTINGS_ENDPOINT)
    body = json_object(response, SETTINGS_ENDPOINT)
    return DeviceSettings.model_validate(
        {
            "center_freq": body.get("center_freq"),
            "uniform_gain": body.get("uniform_gain"),
            "station_id": body.get("station_id"),
        }
    )


async def post_command(transport: Transport, endpoint: str) -> None:
    """Fire a control command; the instrument may drop the connection."""
    await transport.request("POST", transport.url(endpoint))
