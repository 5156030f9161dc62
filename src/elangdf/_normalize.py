"""Normalization helpers.

Lenient parsing of device values: blanks, "--" and non-finite numbers
become None.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def normalize_heading(value: float) -> float:
    """Wrap a heading in degrees into ``[0, 360)``."""
    heading = float(value) % 360.0
    # Tiny negative inputs round up to exactly 360.0.
    return 0.0 if heading >= 360.0 else heading
