"""Provider results and aggregation snapshots."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pydriven.models._base import DrivenEnum, EpochTimestamp
from pydriven.models.location import LocationContext
from pydriven.models.poi import CATEGORY_ORDER, Category, PointOfInterest


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ErrorKind(DrivenEnum):
    TRANSPORT = "transport"
    PROVIDER = "provider"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class CategoryError(BaseModel):
    """Why a category contributed no points in a cycle."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    status_code: int | None = None


class ProviderResult(BaseModel):
    """Outcome of a single provider fetch attempt.

    ``payload`` is the provider-native ``data`` value, untouched.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    provider: Category
    succeeded: bool
    payload: Any = None
    error: CategoryError | None = None
    fetched_at: datetime = Field(default_factory=_utcnow)
    payload_timestamp: EpochTimestamp = None
    """Provider-side ``timestamp`` from the envelope, if any."""

    @classmethod
    def success(
        cls,
        provider: Category,
        payload: Any,
        *,
        payload_timestamp: Any = None,
    ) -> ProviderResult:
        return cls(provider=provider, succeeded=True, payload=payload, payload_timestamp=payload_timestamp)

    @classmethod
    def failure(
        cls,
        provider: Category,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
    ) -> ProviderResult:
        return cls(
            provider=provider,
            succeeded=False,
            error=CategoryError(kind=kind, message=message, status_code=status_code),
        )


class AggregationSnapshot(BaseModel):
    """Fully assembled result of one aggregation cycle.

    Snapshots are never mutated; a newer cycle produces a new snapshot.
    """

    model_config = ConfigDict(frozen=True)

    cycle: int
    location: LocationContext
    per_category: dict[Category, tuple[PointOfInterest, ...]] = Field(default_factory=dict)
    per_category_error: dict[Category, CategoryError | None] = Field(default_factory=dict)
    payload_timestamps: dict[Category, datetime | None] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def country_code(self) -> str:
        return self.location.country_code

    def points(self, category: Category) -> tuple[PointOfInterest, ...]:
        return self.per_category.get(category, ())

    def error(self, category: Category) -> CategoryError | None:
        return self.per_category_error.get(category)

    @property
    def failed_categories(self) -> tuple[Category, ...]:
        return tuple(c for c in CATEGORY_ORDER if self.per_category_error.get(c) is not None)

    def iter_points(self) -> Iterator[PointOfInterest]:
        """Iterate over every point in fixed category order."""
        for category in CATEGORY_ORDER:
            yield from self.per_category.get(category, ())
