"""Coordinate transform between DMS strings and decimal degrees.

Accepted DMS forms (whitespace is ignored)::

    6°10'31.36"S
    6° 10' 31.36" S
    106d49'37.26E
    106°49′37.26″E
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

LATITUDE_LIMIT = 90.0
LONGITUDE_LIMIT = 180.0

_DMS_RE = re.compile(
    r"^(-?\d+(?:\.\d+)?)[°ºd](\d+(?:\.\d+)?)['’′](\d+(?:\.\d+)?)[\"”″]?([NSEW])$",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")

_FORMAT_MESSAGE = "Invalid format\nExample: 6°10'31.36\"S or 106°49'37.26\"E"


@dataclass(frozen=True, slots=True)
class DmsComponents:
    """Parsed DMS value; ``degrees`` is always a magnitude."""

    degrees: float
    minutes: float
    seconds: float
    hemisphere: str

    @property
    def is_latitude(self) -> bool:
        return self.hemisphere in ("N", "S")

    @property
    def magnitude(self) -> float:
        return self.degrees + self.minutes / 60 + self.seconds / 3600


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    message: str | None = None

    def __bool__(self) -> bool:
        return self.valid


def parse_dms(text: Any) -> DmsComponents | None:
    """Split a DMS string into its components, or ``None`` if malformed."""
    if not text or not isinstance(text, str):
        return None

    cleaned = _WHITESPACE_RE.sub("", text.strip())
    match = _DMS_RE.match(cleaned)
    if match is None:
        return None

    return DmsComponents(
        degrees=abs(float(match.group(1))),
        minutes=float(match.group(2)),
        seconds=float(match.group(3)),
        hemisphere=match.group(4).upper(),
    )


def validate_dms(text: Any) -> ValidationResult:
    parsed = parse_dms(text)
    if parsed is None:
        return ValidationResult(False, _FORMAT_MESSAGE)

    if parsed.minutes >= 60 or parsed.seconds >= 60:
        return ValidationResult(False, "Minutes and seconds must be less than 60")

    if parsed.is_latitude and parsed.magnitude > LATITUDE_LIMIT:
        return ValidationResult(False, "Latitude cannot exceed 90°")
    if not parsed.is_latitude and parsed.magnitude > LONGITUDE_LIMIT:
        return ValidationResult(False, "Longitude cannot exceed 180°")

    return ValidationResult(True)


def validate_decimal(value: Any, is_latitude: bool) -> ValidationResult:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return ValidationResult(False, "Input must be a number")
    if math.isnan(number):
        return ValidationResult(False, "Input must be a number")

    limit = LATITUDE_LIMIT if is_latitude else LONGITUDE_LIMIT
    if not -limit <= number <= limit:
        return ValidationResult(False, f"Value must be between -{limit:g} and {limit:g}")

    return ValidationResult(True)


def dms_to_decimal(text: Any) -> float | None:
    """Convert a DMS string to signed decimal degrees (S and W negative)."""
    parsed = parse_dms(text)
    if parsed is None:
        return None

    decimal = parsed.magnitude
    if parsed.hemisphere in ("S", "W"):
        decimal *= -1
    return decimal


def decimal_to_dms(value: Any, is_latitude: bool, precision: int = 2) -> str | None:
    """Format signed decimal degrees as a DMS string.

    Returns ``None`` for non-numeric or out-of-range input. The hemisphere
    follows the sign: non-negative is N/E, negative is S/W.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        decimal = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(decimal):
        return None

    limit = LATITUDE_LIMIT if is_latitude else LONGITUDE_LIMIT
    if not -limit <= decimal <= limit:
        return None

    absolute = abs(decimal)
    degrees = math.floor(absolute)
    minutes_decimal = (absolute - degrees) * 60
    minutes = math.floor(minutes_decimal)
    seconds = round((minutes_decimal - minutes) * 60, precision)

    # Rounding can produce 60.00 seconds; carry it upwards.
    if seconds >= 60:
        seconds = 0.0
        minutes += 1
    if minutes >= 60:
        minutes = 0
        degrees += 1

    if is_latitude:
        hemisphere = "N" if decimal >= 0 else "S"
    else:
        hemisphere = "E" if decimal >= 0 else "W"

    return f"{degrees}°{minutes}'{seconds:.{precision}f}\"{hemisphere}"
