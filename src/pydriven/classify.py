"""Status classification.

Derives a symbolic :class:`~pydriven.models.Tier` from raw provider fields.
Classification is pure: the same point always yields the same tier, with
no dependency on wall-clock time or call order.  Mapping tiers to colours
is left to the presentation layer.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydriven.config import ClassifierThresholds
from pydriven.ingestion.normalize import safe_float
from pydriven.models.poi import Category, PointOfInterest, Tier

FUEL_TYPES: tuple[str, ...] = ("gasoline", "diesel")

_CHARGING_STATUS_TIERS: dict[str, Tier] = {
    "operational": Tier.OPERATIONAL,
    "available": Tier.OPERATIONAL,
    "in use": Tier.IN_USE,
    "out of service": Tier.OUT_OF_SERVICE,
    "unknown": Tier.UNKNOWN,
}


class StatusClassifier:
    """Tier classifier with configurable thresholds."""

    def __init__(self, thresholds: ClassifierThresholds | None = None) -> None:
        self._thresholds = thresholds or ClassifierThresholds()

    @property
    def thresholds(self) -> ClassifierThresholds:
        return self._thresholds

    def parking_tier(self, free_spots: Any, total_spots: Any) -> Tier:
        """Availability tier from free/total spot counts.

        Thresholds are strict: a ratio exactly at the available threshold
        is ``LIMITED``, exactly at the limited threshold is ``FULL``.
        """
        free = safe_float(free_spots)
        total = safe_float(total_spots)
        if free is None or total is None or total <= 0:
            return Tier.UNKNOWN
        ratio = free / total
        if ratio > self._thresholds.parking_available_ratio:
            return Tier.AVAILABLE
        if ratio > self._thresholds.parking_limited_ratio:
            return Tier.LIMITED
        return Tier.FULL

    def price_tier(self, price: Any, fuel: str = "gasoline") -> Tier:
        """Price tier; both bounds are inclusive."""
        value = safe_float(price)
        if value is None:
            return Tier.UNKNOWN
        low, high = self._thresholds.price_band(fuel)
        if value <= low:
            return Tier.LOW
        if value >= high:
            return Tier.HIGH
        return Tier.MODERATE

    @staticmethod
    def charging_tier(status: Any) -> Tier:
        """Map a provider status string onto the fixed charging tiers."""
        if not isinstance(status, str):
            return Tier.UNKNOWN
        return _CHARGING_STATUS_TIERS.get(" ".join(status.lower().split()), Tier.UNKNOWN)

    def classify(self, category: Category, point: PointOfInterest) -> Tier:
        """Return the tier of *point* under *category* rules."""
        attributes = point.attributes
        if category == Category.PARKING:
            return self.parking_tier(attributes.get("free_spots"), attributes.get("total_spots"))
        if category == Category.GAS:
            return self.price_tier(attributes.get("gasoline"), "gasoline")
        if category == Category.CHARGING:
            return self.charging_tier(point.raw_status)
        return Tier.UNKNOWN

    def annotate(self, points: Iterable[PointOfInterest]) -> list[PointOfInterest]:
        """Return copies of *points* with their tier assigned.

        Fuel points additionally get one ``<fuel>_tier`` attribute per fuel.
        """
        annotated: list[PointOfInterest] = []
        for point in points:
            tier = self.classify(point.category, point)
            if point.category == Category.GAS:
                fuel_tiers = {
                    f"{fuel}_tier": self.price_tier(point.attributes.get(fuel), fuel).value for fuel in FUEL_TYPES
                }
                annotated.append(point.with_tier(tier, **fuel_tiers))
            else:
                annotated.append(point.with_tier(tier))
        return annotated


_DEFAULT_CLASSIFIER = StatusClassifier()


def classify(category: Category, point: PointOfInterest) -> Tier:
    """Classify *point* with the default thresholds."""
    return _DEFAULT_CLASSIFIER.classify(category, point)


def annotate(points: Iterable[PointOfInterest]) -> list[PointOfInterest]:
    """Annotate *points* with the default thresholds."""
    return _DEFAULT_CLASSIFIER.annotate(points)
