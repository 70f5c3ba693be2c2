"""Base model and enum for provider payloads.

Every provider record model inherits from :class:`DrivenBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips provider sentinel
  values (``""``, ``"--"``, ``"N/A"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original record.

Presentation enums inherit from :class:`DrivenEnum` which resolves any
value without a mapped member to ``UNKNOWN`` instead of raising.
"""

from __future__ import annotations

import enum
import math
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Sentinel strings providers use for "not available".
_SENTINELS = frozenset({"", "--", "N/A", "n/a", "NaN", "nan"})

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_epoch_timestamp(value: Any) -> datetime | None:
    """Convert an epoch timestamp (seconds **or** milliseconds) to a UTC datetime.

    Returns ``None`` when the value is ``None`` or not numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    try:
        ts = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(ts) or ts <= 0:
        return None
    if ts >= _MS_THRESHOLD:
        ts /= 1000
    return datetime.fromtimestamp(ts, tz=UTC)


EpochTimestamp = Annotated[datetime | None, BeforeValidator(parse_epoch_timestamp)]
"""Annotated type that coerces epoch numbers (seconds or ms) to UTC datetimes."""


class DrivenEnum(enum.StrEnum):
    """Base for symbolic enums.

    Lookup is case-insensitive.  Subclasses that define ``UNKNOWN``
    resolve unmapped values to it; others raise ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> DrivenEnum | None:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value == wanted:
                    return member
        # noinspection PyUnresolvedReferences
        # pylint: disable=no-member
        if hasattr(cls, "UNKNOWN"):
            unknown: DrivenEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return None


class DrivenBaseModel(BaseModel):
    """Base for provider record models.

    Handles:
    * Provider sentinel values (``""``, ``"--"``, ``"N/A"``, NaN) → dropped
      so the field default is used instead
    * Stashes the original record dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original provider record."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        """Strip sentinel values from *values*."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_provider_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw record."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = DrivenBaseModel._clean_dict(original)
        # Keep an explicit raw= from the caller.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
