from __future__ import annotations

import math

import pytest

from pydriven.classify import annotate
from pydriven.ingestion.normalize import (
    coordinates_from_mapping,
    format_price,
    parse_coordinates,
    safe_float,
    safe_str,
)
from pydriven.ingestion.pois import normalize
from pydriven.models import Category, Coordinates, Tier


def test_safe_float_rejects_non_numeric() -> None:
    assert safe_float("1.25") == 1.25
    assert safe_float(3) == 3.0
    assert safe_float(None) is None
    assert safe_float("--") is None
    assert safe_float(True) is None
    assert safe_float(math.nan) is None
    assert safe_float("inf") is None


def test_safe_str_strips_and_rejects_containers() -> None:
    assert safe_str("  Berlin ") == "Berlin"
    assert safe_str("   ") is None
    assert safe_str({"a": 1}) is None
    assert safe_str(12) == "12"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ([13.4, 52.5], (13.4, 52.5)),
        (("7.58", "47.55"), (7.58, 47.55)),
        ([0, 0], None),
        ([181.0, 10.0], None),
        ([10.0, -91.0], None),
        ([1.0], None),
        ("13.4,52.5", None),
        ([None, 52.5], None),
    ],
)
def test_parse_coordinates(value: object, expected: tuple[float, float] | None) -> None:
    assert parse_coordinates(value) == expected


def test_coordinates_from_mapping_prefers_coordinates_key() -> None:
    assert coordinates_from_mapping({"coordinates": [1.0, 2.0], "lat": 5.0, "lng": 6.0}) == (1.0, 2.0)
    assert coordinates_from_mapping({"lat": 48.1, "lng": 11.5}) == (11.5, 48.1)
    assert coordinates_from_mapping({"latitude": 48.1, "longitude": 11.5}) == (11.5, 48.1)
    assert coordinates_from_mapping({"name": "x"}) is None


def test_format_price() -> None:
    assert format_price(1.5) == "1.500"
    assert format_price(2) == "2.000"
    assert format_price("1.5") == "1.5"
    assert format_price(None) == "N/A"


def test_parking_city_payload_end_to_end() -> None:
    payload = {
        "Berlin": [
            {
                "id": "P1",
                "name": "Alexanderplatz",
                "coordinates": [13.41, 52.52],
                "free_spots": 3,
                "total_spots": 120,
                "status": "open",
            }
        ]
    }

    points = annotate(normalize(Category.PARKING, payload))

    assert len(points) == 1
    point = points[0]
    assert point.id == "P1"
    assert point.category == Category.PARKING
    assert point.name == "Alexanderplatz"
    assert point.coordinates == Coordinates(13.41, 52.52)
    assert point.country_code == "DE"
    assert point.raw_status == "open"
    assert point.attributes["city"] == "Berlin"
    assert point.attributes["free_spots"] == 3
    assert "coordinates" not in point.attributes
    assert point.tier == Tier.FULL


def test_parking_five_percent_is_full() -> None:
    payload = {"Berlin": [{"name": "P1", "free_spots": 5, "total_spots": 100}]}

    [point] = annotate(normalize(Category.PARKING, payload))

    assert point.category == Category.PARKING
    assert point.tier == Tier.FULL
    assert point.coordinates == Coordinates(13.4050, 52.5200)


def test_unrecognized_charging_status_is_unknown() -> None:
    payload = [{"id": "C9", "name": "Depot", "lat": 52.5, "lng": 13.4, "status": "Charging"}]

    [point] = annotate(normalize(Category.CHARGING, payload))

    assert point.tier == Tier.UNKNOWN
    assert point.raw_status == "Charging"


def test_parking_without_coordinates_uses_city_centroid() -> None:
    payload = {"Basel": [{"name": "Centralbahnparking", "free_spots": 40, "total_spots": 100}]}

    [point] = normalize(Category.PARKING, payload)

    assert point.coordinates == Coordinates(7.5886, 47.5596)
    assert point.country_code == "CH"
    assert point.id == "parking:Basel:0"


def test_parking_unknown_city_without_coordinates_is_unresolved() -> None:
    payload = {"Atlantis": [{"name": "Harbour", "free_spots": 1, "total_spots": 10}]}

    [point] = normalize(Category.PARKING, payload, country_code="DE")

    assert point.coordinates is None
    assert not point.is_resolved
    assert point.country_code == "DE"


def test_single_city_parking_list() -> None:
    payload = [{"name": "Altmarkt", "lat": 51.05, "lng": 13.74, "free_spots": 30, "total_spots": 100}]

    [point] = normalize(Category.PARKING, payload, city="Dresden")

    assert point.coordinates == Coordinates(13.74, 51.05)
    assert point.attributes["city"] == "Dresden"


def test_zero_coordinates_are_unresolved() -> None:
    payload = [{"id": "C0", "name": "Ghost", "coordinates": [0, 0], "status": "Operational"}]

    [point] = normalize(Category.CHARGING, payload)

    assert point.coordinates is None
    assert point.longitude is None


def test_malformed_records_are_skipped() -> None:
    payload = [
        {"id": "S1", "name": "Good", "lat": 52.5, "lng": 13.4, "status": "Operational"},
        "not-a-record",
        42,
        {"id": "S2", "name": "Also good", "coordinates": [11.5, 48.1], "status": "In Use"},
    ]

    points = normalize(Category.CHARGING, payload)

    assert [p.id for p in points] == ["S1", "S2"]


def test_parking_record_without_name_is_skipped() -> None:
    payload = {"Hamburg": [{"id": "H1", "name": "", "free_spots": 1, "total_spots": 2}, {"name": "Elbe"}]}

    points = normalize(Category.PARKING, payload)

    assert [p.name for p in points] == ["Elbe"]


def test_wrong_payload_shape_yields_empty_list() -> None:
    assert normalize(Category.CHARGING, {"unexpected": "object"}) == []
    assert normalize(Category.GAS, "text") == []
    assert normalize(Category.PARKING, None) == []


def test_gas_prices_keep_raw_values_and_display() -> None:
    payload = [{"country": "Germany", "currency": "EUR", "gasoline": 1.5, "diesel": "N/A"}]

    [point] = normalize(Category.GAS, payload)

    assert point.id == "gas:DE:0"
    assert point.country_code == "DE"
    assert point.name == "Germany"
    assert point.coordinates is None
    assert point.attributes["gasoline"] == 1.5
    assert point.attributes["gasoline_display"] == "1.500"
    assert point.attributes["diesel"] == "N/A"
    assert point.attributes["diesel_display"] == "N/A"


def test_speed_cameras_with_lat_lng() -> None:
    payload = [{"id": "cam-7", "name": "A100", "lat": 52.49, "lng": 13.35, "country": "Germany"}]

    [point] = normalize(Category.SPEED_CAMERA, payload, country_code="FR")

    assert point.coordinates == Coordinates(13.35, 52.49)
    assert point.country_code == "DE"
    assert "lat" not in point.attributes


def test_normalize_is_idempotent() -> None:
    payload = [
        {"ID": 17, "name": "Supercharger", "coordinates": [8.54, 47.37], "status": "Available", "connections": "8"}
    ]
    first = normalize(Category.CHARGING, payload, country_code="CH")

    assert first[0].id == "17"
    assert normalize(Category.CHARGING, first) == first
    assert normalize(Category.CHARGING, [p.model_dump() for p in first]) == first


def test_record_with_category_and_attributes_keys_is_still_a_record() -> None:
    payload = [
        {
            "id": "C5",
            "name": "Hub",
            "lat": 52.5,
            "lng": 13.4,
            "category": "charging",
            "attributes": {"kw": 150},
            "status": "Operational",
        }
    ]

    [point] = normalize(Category.CHARGING, payload, country_code="DE")

    assert point.id == "C5"
    assert point.name == "Hub"
    assert point.coordinates == Coordinates(13.4, 52.5)
    assert point.raw_status == "Operational"
    assert point.attributes["category"] == "charging"


def test_nested_values_do_not_reach_attributes() -> None:
    payload = [{"id": "S9", "name": "Hub", "lat": 1.0, "lng": 1.0, "connectors": [{"kw": 50}], "meta": {"a": 1}}]

    [point] = normalize(Category.CHARGING, payload)

    assert "connectors" not in point.attributes
    assert "meta" not in point.attributes
