"""Category filtering over a published snapshot.

All functions here are pure: they read a snapshot and return new
sequences.
"""

from __future__ import annotations

from collections.abc import Collection

from pydriven.models.poi import CATEGORY_ORDER, Category, PointOfInterest
from pydriven.models.results import AggregationSnapshot


def project(
    snapshot: AggregationSnapshot | None,
    enabled_categories: Collection[Category],
    *,
    include_unresolved: bool = False,
) -> list[PointOfInterest]:
    """Return the visible points of *snapshot*.

    Points are concatenated in fixed category order (parking, gas,
    charging, speed cameras), keeping only *enabled_categories*.  Points
    without a usable position are left out unless *include_unresolved*.
    """
    if snapshot is None or not enabled_categories:
        return []
    visible: list[PointOfInterest] = []
    for category in CATEGORY_ORDER:
        if category not in enabled_categories:
            continue
        for point in snapshot.points(category):
            if include_unresolved or point.is_resolved:
                visible.append(point)
    return visible


def unresolved(snapshot: AggregationSnapshot | None) -> list[PointOfInterest]:
    """Points kept for diagnostics because their position is unknown."""
    if snapshot is None:
        return []
    return [point for point in snapshot.iter_points() if not point.is_resolved]


def category_counts(snapshot: AggregationSnapshot | None) -> dict[Category, int]:
    """Number of points per category, zero for categories without data."""
    if snapshot is None:
        return {category: 0 for category in CATEGORY_ORDER}
    return {category: len(snapshot.points(category)) for category in CATEGORY_ORDER}
