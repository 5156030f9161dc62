"""Base model for elangdf data models.

Every model inherits from :class:`DfBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase document/API keys map
  automatically to snake_case fields.
* ``frozen=True`` so readings are replaced wholesale, never mutated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DfBaseModel(BaseModel):
    """Base for elangdf models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
