"""Compass endpoint.

Endpoint:
  - GET /api/compass  -> {"heading": <number>}
"""

from __future__ import annotations

from pydantic import ValidationError

from elangdf._api._common import json_object, raise_for_status
from elangdf._transport import Transport
from elangdf.exceptions import DfParseError
from elangdf.models.compass import CompassReading

COMPASS_ENDPOINT = "/api/compass"


async def read_compass(transport: Transport) -> CompassReading:
    """Fetch the instrument's compass heading."""
    response = await transport.request("GET", transport.url(COMPASS_ENDPOINT))
    raise_for_status(response, COMPASS_ENDPOINT)
    body = json_object(response, COMPASS_ENDPOINT)
    try:
        return CompassReading.model_validate(body)
    except ValidationError as exc:
        raise DfParseError(f"Invalid compass payload: {response.text[:200]}") from exc
