"""Bearing / polar sweep models."""

from __future__ import annotations

from pydantic import Field, field_validator

from elangdf._constants import POLAR_SAMPLES
from elangdf._normalize import normalize_heading
from elangdf.models._base import DfBaseModel


class BearingReading(DfBaseModel):
    """One DF sweep as reported by ``GET /df``.

    Parameters
    ----------
    timestamp : str
        Opaque token identifying the sweep; repeats while the device has
        nothing new.
    heading : float
        Bearing in degrees, normalized to ``[0, 360)``.
    confidence : str
        Device confidence figure, kept as sent.
    power : str
        Device power figure, kept as sent.
    polar : tuple of float
        Exactly 360 magnitudes indexed by angle.
    """

    timestamp: str
    heading: float
    confidence: str = ""
    power: str = ""
    polar: tuple[float, ...] = Field(default_factory=tuple)

    @field_validator("heading", mode="after")
    @classmethod
    def _wrap_heading(cls, value: float) -> float:
        return normalize_heading(value)

    @field_validator("polar", mode="after")
    @classmethod
    def _check_polar_length(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if len(value) != POLAR_SAMPLES:
            raise ValueError(f"polar must have {POLAR_SAMPLES} samples, got {len(value)}")
        return value

    @property
    def peak_angle(self) -> int:
        """Angle (index) of the strongest polar magnitude."""
        return max(range(len(self.polar)), key=self.polar.__getitem__)

    def magnitude_at(self, angle: int) -> float:
        """Polar magnitude at an integer angle (wrapped into 0..359)."""
        return self.polar[int(angle) % POLAR_SAMPLES]
