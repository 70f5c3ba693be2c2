"""Query location models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pydriven._constants import DEFAULT_RADIUS_KM
from pydriven.ingestion.normalize import safe_float
from pydriven.models._base import DrivenEnum


class LocationSource(DrivenEnum):
    """Where a query coordinate came from."""

    DEVICE = "device"
    COUNTRY_DEFAULT = "country_default"


class DevicePosition(BaseModel):
    """A one-shot position reported by the device.

    Numeric fields are ``None`` when the value is absent or unparseable.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float | None = Field(default=None, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float | None = Field(default=None, validation_alias=AliasChoices("longitude", "lng", "lon"))
    accuracy: float | None = Field(default=None, validation_alias=AliasChoices("accuracy", "acc"))

    @field_validator("latitude", "longitude", "accuracy", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @property
    def is_usable(self) -> bool:
        """Whether the position is a finite, in-range, non-sentinel coordinate."""
        if self.latitude is None or self.longitude is None:
            return False
        if self.latitude == 0 and self.longitude == 0:
            return False
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0


class LocationContext(BaseModel):
    """The resolved query location for one aggregation cycle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    latitude: float
    longitude: float
    source: LocationSource
    country_code: str
    radius_km: float | None = None
    """Bounded query radius; only set for device-sourced locations."""

    @classmethod
    def from_device(
        cls,
        position: DevicePosition,
        country_code: str,
        *,
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> LocationContext:
        if position.latitude is None or position.longitude is None:
            raise ValueError("device position has no coordinates")
        return cls(
            latitude=position.latitude,
            longitude=position.longitude,
            source=LocationSource.DEVICE,
            country_code=country_code,
            radius_km=radius_km,
        )

    @classmethod
    def country_default(cls, centroid: tuple[float, float], country_code: str) -> LocationContext:
        """Build a context from a ``(longitude, latitude)`` centroid."""
        longitude, latitude = centroid
        return cls(
            latitude=latitude,
            longitude=longitude,
            source=LocationSource.COUNTRY_DEFAULT,
            country_code=country_code,
        )

    @property
    def is_device(self) -> bool:
        return self.source == LocationSource.DEVICE
