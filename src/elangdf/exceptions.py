"""Custom exception hierarchy for elangdf."""

from __future__ import annotations

from enum import StrEnum


class DfError(Exception):
    """Base exception for all elangdf errors."""


class DfConfigError(DfError):
    """Invalid or missing configuration."""


class DfTransportError(DfError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class DfParseError(DfError):
    """Malformed or short telemetry payload."""


class DfPersistenceError(DfError):
    """Settings document could not be read or written."""


class LocationErrorCode(StrEnum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"


class LocationProviderError(DfError):
    """A location provider failed to deliver a fix.

    ``PERMISSION_DENIED`` and ``POSITION_UNAVAILABLE`` tell the location
    store to fall back to IP geolocation; ``TIMEOUT`` does not.
    """

    def __init__(self, message: str, *, code: LocationErrorCode) -> None:
        self.code = code
        super().__init__(message)
