"""Normalization helpers.

Centralizes defensive parsing and placeholder handling for provider data.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

Scalar = str | int | float | bool | None

_LONGITUDE_KEYS = ("longitude", "lng", "lon")
_LATITUDE_KEYS = ("latitude", "lat")


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--" or isinstance(value, bool):
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


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (Mapping, list, tuple)):
        return None
    text = str(value).strip()
    return text if text else None


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def scalar_attributes(data: Mapping[str, Any], *, exclude: frozenset[str] = frozenset()) -> dict[str, Scalar]:
    """Return the scalar entries of *data*, skipping keys in *exclude*.

    Nested mappings and sequences never reach the point-of-interest
    attributes; NaN floats are dropped as well.
    """
    attributes: dict[str, Scalar] = {}
    for key, value in data.items():
        name = str(key)
        if name in exclude or not is_scalar(value):
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        attributes[name] = value
    return attributes


def parse_coordinates(value: Any) -> tuple[float, float] | None:
    """Parse a ``[longitude, latitude]`` pair.

    Returns ``None`` for anything that is not two finite, in-range floats,
    and for the ``(0, 0)`` sentinel providers use for "unknown".
    """
    if isinstance(value, Mapping):
        return coordinates_from_mapping(value)
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None
    if len(value) != 2:
        return None
    return _validated_pair(safe_float(value[0]), safe_float(value[1]))


def coordinates_from_mapping(data: Mapping[str, Any]) -> tuple[float, float] | None:
    """Find coordinates in a record.

    ``coordinates`` (``[lon, lat]``) wins; otherwise separate
    longitude/latitude keys are tried.
    """
    if "coordinates" in data and data["coordinates"] is not None:
        return parse_coordinates(data["coordinates"])
    lon = next((data[key] for key in _LONGITUDE_KEYS if data.get(key) is not None), None)
    lat = next((data[key] for key in _LATITUDE_KEYS if data.get(key) is not None), None)
    return _validated_pair(safe_float(lon), safe_float(lat))


def _validated_pair(lon: float | None, lat: float | None) -> tuple[float, float] | None:
    if lon is None or lat is None:
        return None
    if lon == 0 and lat == 0:
        return None
    if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
        return None
    return (lon, lat)


def format_price(value: Any) -> str:
    """Format a price for display with three decimals.

    Non-numeric values are shown as-is (or ``"N/A"`` when empty).
    """
    parsed = safe_float(value) if isinstance(value, (int, float)) else None
    if parsed is not None:
        return f"{parsed:.3f}"
    text = safe_str(value)
    return text if text else "N/A"
