"""IP geolocation lookup (third party, unauthenticated).

Endpoint:
  - GET https://ipapi.co/json/  -> {latitude, longitude, city, country_name}
"""

from __future__ import annotations

from pydantic import ValidationError

from elangdf._api._common import json_object, raise_for_status
from elangdf._transport import Transport
from elangdf.exceptions import DfParseError
from elangdf.models.location import IpLocation


async def lookup_ip_location(transport: Transport, url: str) -> IpLocation:
    response = await transport.request("GET", url)
    raise_for_status(response, url)
    body = json_object(response, url)
    try:
        return IpLocation.model_validate(body)
    except ValidationError as exc:
        # ipapi.co reports rate limiting as {"error": true, "reason": ...}
        reason = body.get("reason") or body.get("message") or "missing coordinates"
        raise DfParseError(f"IP geolocation failed: {reason}") from exc
