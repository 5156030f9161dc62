"""Uniform result of a Remote Telemetry Client call."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ApiResult(BaseModel, Generic[T]):
    """``{success, data | error}`` envelope.

    Exactly one of ``data`` / ``error`` is meaningful: ``data`` when
    ``success`` is true, ``error`` otherwise.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> ApiResult[Any]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> ApiResult[Any]:
        return cls(success=False, error=error)
