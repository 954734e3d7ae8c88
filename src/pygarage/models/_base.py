"""Base model, enum and coercion helpers for backend rows.

Every row model inherits from :class:`GarageBaseModel` which provides:

* frozen instances with unknown columns ignored
* a ``raw`` dict that captures the original row

Text enums inherit from :class:`GarageEnum` which adds an ``UNKNOWN``
member and a ``_missing_`` hook that returns ``UNKNOWN`` for any value
without a mapped member.
"""

from __future__ import annotations

import enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str:
    """Text column value; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return str(value)


class GarageEnum(enum.StrEnum):
    """Base for enumerated text columns.

    Every subclass **must** define ``UNKNOWN``.  Matching is
    case-insensitive and ignores surrounding whitespace.
    """

    @classmethod
    def _missing_(cls, value: object) -> GarageEnum:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        unknown: GarageEnum = cls["UNKNOWN"]
        return unknown


class GarageBaseModel(BaseModel):
    """Base for rows read from the hosted table API."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original row dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        # Keep the caller's raw when constructing with kwargs that include it.
        if "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = dict(values)
        return merged
