"""Compass heading model."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from elangdf._normalize import safe_float
from elangdf.models._base import DfBaseModel


class CompassReading(DfBaseModel):
    """Heading reported by ``GET /api/compass``."""

    heading: float

    @field_validator("heading", mode="before")
    @classmethod
    def _coerce_heading(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"compass heading is not numeric: {value!r}")
        return parsed
