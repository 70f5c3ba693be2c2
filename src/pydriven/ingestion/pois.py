"""Provider payload → :class:`PointOfInterest` normalization.

Each category has its own payload shape:

* Parking: ``{city: [location, ...]}`` (all cities) or ``[location, ...]``
  (single city).  Locations without coordinates get the city centroid.
* Gas: ``[{country, currency, gasoline, diesel}, ...]``.
* Charging: ``[station, ...]``.
* Speed cameras: ``[camera, ...]``.

Normalization never raises for a successful payload.  Records that fail
validation are logged and skipped one by one; a payload of the wrong
overall shape yields an empty list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from pydriven._constants import CITY_COUNTRY_CODES, city_centroid
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.exceptions import MalformedRecordError
from pydriven.ingestion.normalize import format_price, scalar_attributes
from pydriven.models.poi import Category, PointOfInterest
from pydriven.models.records import ChargingStationRecord, GasPriceRecord, ParkingRecord, SpeedCameraRecord

_logger = logging.getLogger(__name__)

# Keys folded into dedicated PointOfInterest fields instead of attributes.
_POSITION_KEYS = frozenset({"coordinates", "lat", "lng", "lon", "latitude", "longitude"})
_IDENTITY_KEYS = frozenset({"id", "ID", "station_id", "name"})
_EXCLUDED_KEYS = _POSITION_KEYS | _IDENTITY_KEYS

_POINT_FIELDS = frozenset(PointOfInterest.model_fields)
# Keys a provider record never carries all at once.
_DUMPED_POINT_KEYS = frozenset({"id", "category", "tier", "attributes"})


def _validate(model: type[Any], item: Any) -> Any:
    if not isinstance(item, Mapping):
        raise MalformedRecordError(f"expected an object, got {type(item).__name__}", record=item)
    try:
        return model.model_validate(dict(item))
    except ValidationError as exc:
        raise MalformedRecordError(f"{model.__name__} validation failed: {exc.error_count()} error(s)", record=item) from exc


def _is_dumped_point(item: Any) -> bool:
    """Whether *item* looks like ``PointOfInterest.model_dump()`` output.

    Every key must be a point field and the point-only keys must all be
    present, so a provider record that merely has a ``category`` key is
    still parsed as a record.
    """
    if not isinstance(item, Mapping) or not _DUMPED_POINT_KEYS.issubset(item.keys()):
        return False
    if not _POINT_FIELDS.issuperset(item.keys()):
        return False
    try:
        Category(item["category"])
    except ValueError:
        return False
    return True


def _already_normalized(item: Any, category: Category) -> PointOfInterest | None:
    """Return *item* as a point if it is one already (or a dumped one)."""
    if isinstance(item, PointOfInterest):
        point = item
    elif _is_dumped_point(item):
        try:
            point = PointOfInterest.model_validate(dict(item))
        except ValidationError as exc:
            raise MalformedRecordError("normalized point failed validation", record=item) from exc
    else:
        return None
    if point.category != category:
        raise MalformedRecordError(f"{point.category} point in {category} payload", record=item)
    return point


def _country_code(registry: CountryRegistry, identifier: str | None, fallback: str | None) -> str | None:
    country = registry.get(identifier)
    if country is not None:
        return country.code
    return fallback


class PoiNormalizer:
    """Category-aware payload normalizer."""

    def __init__(self, registry: CountryRegistry = DEFAULT_REGISTRY) -> None:
        self._registry = registry
        self._handlers: dict[Category, Callable[[Any, int, str | None], PointOfInterest]] = {
            Category.GAS: self._gas_point,
            Category.CHARGING: self._charging_point,
            Category.SPEED_CAMERA: self._camera_point,
        }

    def normalize(
        self,
        category: Category,
        payload: Any,
        *,
        country_code: str | None = None,
        city: str | None = None,
    ) -> list[PointOfInterest]:
        """Normalize a provider ``data`` payload into ordered points.

        Parameters
        ----------
        category : Category
            Provider category the payload came from.
        payload : Any
            Provider-native ``data`` value.
        country_code : str or None
            Country of the query; used when a record names none.
        city : str or None
            City of a single-city parking payload.
        """
        if category == Category.PARKING:
            return self._normalize_parking(payload, country_code=country_code, city=city)
        if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
            _logger.warning("Ignoring %s payload of type %s", category, type(payload).__name__)
            return []
        handler = self._handlers[category]
        points: list[PointOfInterest] = []
        for index, item in enumerate(payload):
            try:
                point = _already_normalized(item, category)
                points.append(point if point is not None else handler(item, index, country_code))
            except MalformedRecordError as exc:
                _logger.debug("Skipping malformed %s record #%d: %s", category, index, exc)
        return points

    # ------------------------------------------------------------------
    # Parking
    # ------------------------------------------------------------------

    def _normalize_parking(
        self,
        payload: Any,
        *,
        country_code: str | None,
        city: str | None,
    ) -> list[PointOfInterest]:
        groups: list[tuple[str | None, Any]]
        if isinstance(payload, Mapping):
            groups = [(str(name), locations) for name, locations in payload.items()]
        elif isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
            groups = [(city, payload)]
        else:
            _logger.warning("Ignoring parking payload of type %s", type(payload).__name__)
            return []

        points: list[PointOfInterest] = []
        for group_city, locations in groups:
            if not isinstance(locations, Sequence) or isinstance(locations, (str, bytes)):
                _logger.debug("Skipping parking city %r: locations are not a list", group_city)
                continue
            for index, item in enumerate(locations):
                try:
                    point = _already_normalized(item, Category.PARKING)
                    if point is None:
                        point = self._parking_point(item, index, group_city, country_code)
                    points.append(point)
                except MalformedRecordError as exc:
                    _logger.debug("Skipping malformed parking record %r #%d: %s", group_city, index, exc)
        return points

    def _parking_point(
        self,
        item: Any,
        index: int,
        city: str | None,
        country_code: str | None,
    ) -> PointOfInterest:
        record: ParkingRecord = _validate(ParkingRecord, item)
        record_city = city or record.city
        coordinates = record.coordinates or city_centroid(record_city)
        attributes = scalar_attributes(record.raw, exclude=_EXCLUDED_KEYS)
        attributes["city"] = record_city
        return PointOfInterest(
            id=record.id or f"parking:{record_city or '-'}:{index}",
            category=Category.PARKING,
            name=record.name,
            # (0, 0) marks an unresolved position and validates to None.
            coordinates=coordinates or (0.0, 0.0),
            country_code=CITY_COUNTRY_CODES.get(record_city or "", country_code),
            raw_status=record.status,
            attributes=attributes,
        )

    # ------------------------------------------------------------------
    # Flat categories
    # ------------------------------------------------------------------

    def _gas_point(self, item: Any, index: int, country_code: str | None) -> PointOfInterest:
        record: GasPriceRecord = _validate(GasPriceRecord, item)
        attributes = scalar_attributes(record.raw, exclude=_EXCLUDED_KEYS)
        attributes["gasoline_display"] = format_price(record.raw.get("gasoline"))
        attributes["diesel_display"] = format_price(record.raw.get("diesel"))
        code = _country_code(self._registry, record.country, country_code)
        return PointOfInterest(
            id=f"gas:{code or record.country}:{index}",
            category=Category.GAS,
            name=record.country,
            coordinates=record.coordinates,
            country_code=code,
            attributes=attributes,
        )

    def _charging_point(self, item: Any, index: int, country_code: str | None) -> PointOfInterest:
        record: ChargingStationRecord = _validate(ChargingStationRecord, item)
        return PointOfInterest(
            id=record.id or f"charging:{index}",
            category=Category.CHARGING,
            name=record.name,
            coordinates=record.coordinates,
            country_code=_country_code(self._registry, record.country, country_code),
            raw_status=record.status,
            attributes=scalar_attributes(record.raw, exclude=_EXCLUDED_KEYS),
        )

    def _camera_point(self, item: Any, index: int, country_code: str | None) -> PointOfInterest:
        record: SpeedCameraRecord = _validate(SpeedCameraRecord, item)
        return PointOfInterest(
            id=record.id or f"speed_camera:{index}",
            category=Category.SPEED_CAMERA,
            name=record.name,
            coordinates=record.coordinates,
            country_code=_country_code(self._registry, record.country, country_code),
            raw_status=record.status,
            attributes=scalar_attributes(record.raw, exclude=_EXCLUDED_KEYS),
        )


_DEFAULT_NORMALIZER = PoiNormalizer()


def normalize(
    category: Category,
    payload: Any,
    *,
    country_code: str | None = None,
    city: str | None = None,
) -> list[PointOfInterest]:
    """Normalize *payload* with the default country registry."""
    return _DEFAULT_NORMALIZER.normalize(category, payload, country_code=country_code, city=city)
