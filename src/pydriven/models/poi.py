"""Point-of-interest model shared by every provider category."""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pydriven.ingestion.normalize import Scalar, parse_coordinates
from pydriven.models._base import DrivenEnum

_CATEGORY_ALIASES: dict[str, str] = {
    "parkings": "parking",
    "fuel": "gas",
    "gas_prices": "gas",
    "ev": "charging",
    "chargers": "charging",
    "charging_stations": "charging",
    "speedcamera": "speed_camera",
    "speedcameras": "speed_camera",
    "speed_cameras": "speed_camera",
    "speed-cameras": "speed_camera",
    "cameras": "speed_camera",
}


class Category(DrivenEnum):
    """Provider category of a point of interest."""

    PARKING = "parking"
    GAS = "gas"
    CHARGING = "charging"
    SPEED_CAMERA = "speed_camera"

    @classmethod
    def _missing_(cls, value: object) -> Category | None:
        if isinstance(value, str):
            wanted = value.strip().lower()
            wanted = _CATEGORY_ALIASES.get(wanted, wanted)
            for member in cls:
                if member.value == wanted:
                    return member
        return None


CATEGORY_ORDER: tuple[Category, ...] = (
    Category.PARKING,
    Category.GAS,
    Category.CHARGING,
    Category.SPEED_CAMERA,
)
"""Fixed order used whenever categories are concatenated."""


class Tier(DrivenEnum):
    """Symbolic presentation status derived from raw provider fields."""

    # Parking
    AVAILABLE = "available"
    LIMITED = "limited"
    FULL = "full"
    # Gas
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    # Charging
    OPERATIONAL = "operational"
    IN_USE = "in_use"
    OUT_OF_SERVICE = "out_of_service"

    UNKNOWN = "unknown"


class Coordinates(NamedTuple):
    """A position, always stored as (longitude, latitude)."""

    longitude: float
    latitude: float


class PointOfInterest(BaseModel):
    """A normalized point of interest.

    ``coordinates`` is ``None`` when the provider gave no usable position;
    such points stay in the snapshot for diagnostics but never reach a
    spatial projection.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    category: Category
    name: str = ""
    coordinates: Coordinates | None = None
    country_code: str | None = None
    raw_status: str | None = None
    tier: Tier = Tier.UNKNOWN
    attributes: dict[str, Scalar] = Field(default_factory=dict)

    @field_validator("coordinates", mode="before")
    @classmethod
    def _coerce_coordinates(cls, value: Any) -> Coordinates | None:
        if value is None:
            return None
        parsed = parse_coordinates(value)
        return Coordinates(*parsed) if parsed is not None else None

    @property
    def is_resolved(self) -> bool:
        """Whether the point has a usable position."""
        return self.coordinates is not None

    @property
    def longitude(self) -> float | None:
        return self.coordinates.longitude if self.coordinates is not None else None

    @property
    def latitude(self) -> float | None:
        return self.coordinates.latitude if self.coordinates is not None else None

    def with_tier(self, tier: Tier, **attributes: Scalar) -> PointOfInterest:
        """Return a copy carrying *tier* (and optional extra attributes)."""
        update: dict[str, Any] = {"tier": tier}
        if attributes:
            update["attributes"] = {**self.attributes, **attributes}
        return self.model_copy(update=update)
