from __future__ import annotations

import pytest

from pydriven.countries import DEFAULT_REGISTRY, Country, CountryRegistry


def test_lookup_by_code_or_name_is_case_insensitive() -> None:
    assert DEFAULT_REGISTRY.code("germany") == "DE"
    assert DEFAULT_REGISTRY.code(" de ") == "DE"
    assert DEFAULT_REGISTRY.name("ch") == "Switzerland"
    assert DEFAULT_REGISTRY.get("Czech Republic") is not None


def test_unknown_country_falls_back_to_default() -> None:
    assert DEFAULT_REGISTRY.get("Atlantis") is None
    assert DEFAULT_REGISTRY.resolve("Atlantis").code == "DE"
    assert DEFAULT_REGISTRY.code(None) == "DE"


def test_centroids_are_lon_lat_in_range() -> None:
    for country in DEFAULT_REGISTRY:
        lon, lat = country.centroid
        assert -180 <= lon <= 180
        assert -90 <= lat <= 90
    # Berlin, not a swapped pair.
    assert DEFAULT_REGISTRY.centroid("DE") == (13.4050, 52.5200)


def test_membership() -> None:
    assert "FR" in DEFAULT_REGISTRY
    assert "Mordor" not in DEFAULT_REGISTRY
    assert 3 not in DEFAULT_REGISTRY
    assert len(DEFAULT_REGISTRY) == 17


def test_custom_registry_requires_known_default() -> None:
    countries = [Country("Iceland", "IS", (-21.94, 64.15))]
    registry = CountryRegistry(countries, default_code="IS")
    assert registry.code("whatever") == "IS"

    with pytest.raises(ValueError):
        CountryRegistry(countries, default_code="DE")
