"""DF sweep endpoint.

Endpoint:
  - GET /df  -> comma separated text

Layout: field 0 timestamp token, field 1 raw heading, field 2 confidence,
field 3 power, fields 17..376 polar magnitudes (stored reversed).
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from elangdf._constants import (
    DF_FIELD_CONFIDENCE,
    DF_FIELD_HEADING,
    DF_FIELD_POWER,
    DF_FIELD_TIMESTAMP,
    DF_MIN_FIELDS,
    DF_POLAR_END,
    DF_POLAR_START,
)
from elangdf._normalize import safe_float
from elangdf._transport import Transport
from elangdf.exceptions import DfParseError, DfTransportError
from elangdf.models.bearing import BearingReading

_logger = logging.getLogger(__name__)

DF_ENDPOINT = "/df"


def parse_df_payload(text: str) -> BearingReading:
    """Parse the raw ``/df`` body into a :class:`BearingReading`.

    Raises
    ------
    DfParseError
        If the payload is empty, has fewer than 377 fields or carries
        non-numeric heading/polar values.
    """
    if not text or not text.strip():
        raise DfParseError("DF data is empty")

    fields = [value.strip() for value in text.split(",")]
    if len(fields) < DF_MIN_FIELDS:
        raise DfParseError("DF data is incomplete")

    raw_heading = safe_float(fields[DF_FIELD_HEADING])
    if raw_heading is None:
        raise DfParseError(f"DF heading is not numeric: {fields[DF_FIELD_HEADING]!r}")

    polar: list[float] = []
    for index in range(DF_POLAR_START, DF_POLAR_END):
        value = safe_float(fields[index])
        if value is None:
            raise DfParseError(f"DF polar field {index} is not numeric: {fields[index]!r}")
        polar.append(value)
    polar.reverse()

    try:
        return BearingReading(
            timestamp=fields[DF_FIELD_TIMESTAMP],
            heading=(360 - raw_heading) % 360,
            confidence=fields[DF_FIELD_CONFIDENCE],
            power=fields[DF_FIELD_POWER],
            polar=tuple(polar),
        )
    except ValidationError as exc:
        raise DfParseError(f"DF data is invalid: {exc}") from exc


async def read_df(transport: Transport) -> BearingReading:
    """Fetch and parse one DF sweep.

    Raises
    ------
    DfTransportError
        On network failure or a non-2xx status.
    DfParseError
        On a malformed payload.
    """
    response = await transport.request("GET", transport.url(DF_ENDPOINT))
    if not response.ok:
        raise DfTransportError(f"HTTP {response.status}", status_code=response.status, endpoint=DF_ENDPOINT)

    reading = parse_df_payload(response.text)
    _logger.debug("DF sweep timestamp=%s heading=%.1f", reading.timestamp, reading.heading)
    return reading
