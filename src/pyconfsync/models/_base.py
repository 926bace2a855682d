"""Base model and enum for conference API payloads.

Every dataset model inherits from :class:`ConfBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase JSON keys map
  automatically to snake_case fields (and serialize back with
  ``by_alias=True``).
* Frozen instances: a decoded dataset is never mutated in place.
* A ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used.

Enums inherit from :class:`ConfEnum` which adds an ``UNKNOWN`` member
at ``-1`` and a ``_missing_`` hook that returns ``UNKNOWN`` for any
value without a mapped member.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class ConfEnum(enum.IntEnum):
    """Base for payload enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    """

    @classmethod
    def _missing_(cls, value: object) -> ConfEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: ConfEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class ConfBaseModel(BaseModel):
    """Base for conference dataset models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
