"""Shared helpers for instrument endpoint modules.

It is internal to elangdf and may change at any time.
"""

from __future__ import annotations

from typing import Any

from elangdf._transport import RawResponse
from elangdf.exceptions import DfTransportError


def raise_for_status(response: RawResponse, endpoint: str, *, exact_200: bool = False) -> None:
    """Raise :class:`DfTransportError` for an unsuccessful status.

    ``exact_200`` mirrors the endpoints that only accept ``200`` (antenna
    and station id) and report errors as ``"<status>: <body>"``.
    """
    if exact_200:
        if response.status != 200:
            raise DfTransportError(
                f"{response.status}: {response.text}",
                status_code=response.status,
                endpoint=endpoint,
            )
        return
    if not response.ok:
        raise DfTransportError(
            f"HTTP {response.status}: {response.text}",
            status_code=response.status,
            endpoint=endpoint,
        )


def json_object(response: RawResponse, endpoint: str) -> dict[str, Any]:
    """Decode a JSON object body."""
    body = response.json()
    if not isinstance(body, dict):
        raise DfTransportError(f"Expected JSON object from {endpoint}", endpoint=endpoint)
    return body
