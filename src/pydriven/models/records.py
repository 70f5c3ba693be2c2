"""Per-category provider record models.

Each provider speaks its own loosely-typed JSON.  These models are the
closed set of record variants accepted at the normalization boundary;
anything that does not validate is a malformed record.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from pydriven.ingestion.normalize import coordinates_from_mapping, safe_int, safe_str
from pydriven.models._base import DrivenBaseModel


class _LocatedRecord(DrivenBaseModel):
    """Record that may carry a position as ``coordinates`` or lat/lng keys."""

    coordinates: tuple[float, float] | None = None
    """Validated ``(longitude, latitude)`` or ``None``."""

    @model_validator(mode="before")
    @classmethod
    def _extract_coordinates(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        merged["coordinates"] = coordinates_from_mapping(values)
        return merged


class ParkingRecord(_LocatedRecord):
    """A parking facility as reported by the parking provider."""

    id: str | None = None
    name: str
    city: str | None = None
    free_spots: Any = None
    total_spots: Any = None
    status: str | None = None
    address: str | None = None

    @field_validator("id", "name", "city", "status", "address", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)


class GasPriceRecord(_LocatedRecord):
    """Per-country fuel prices; prices stay raw until classification."""

    country: str
    currency: str | None = None
    gasoline: Any = None
    diesel: Any = None

    @field_validator("country", "currency", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)


class ChargingStationRecord(_LocatedRecord):
    """An EV charging station."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "ID", "station_id"))
    name: str = ""
    status: str | None = None
    operator: str | None = None
    connections: int | None = None
    address: str | None = None
    town: str | None = None
    country: str | None = None

    @field_validator("id", "status", "operator", "address", "town", "country", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return safe_str(value) or ""

    @field_validator("connections", mode="before")
    @classmethod
    def _coerce_connections(cls, value: Any) -> int | None:
        return safe_int(value)


class SpeedCameraRecord(_LocatedRecord):
    """A fixed or mobile speed camera."""

    id: str | None = None
    name: str = ""
    status: str | None = None
    country: str | None = None

    @field_validator("id", "status", "country", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return safe_str(value) or ""
