"""EV charging station endpoint.

Endpoint:
  - /api/charging/stations?country_code=<CC>[&lat=&lng=&radius=]
"""

from __future__ import annotations

from pydriven._api._common import fetch_result
from pydriven._constants import CHARGING_STATIONS_ENDPOINT, DEFAULT_RADIUS_KM
from pydriven._transport import Transport
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.models.location import LocationContext
from pydriven.models.poi import Category
from pydriven.models.results import ProviderResult


def build_charging_params(
    country_code: str,
    location: LocationContext,
    *,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> dict[str, str | float]:
    """Build the station query.

    Only a device-sourced location narrows the query to a radius; a
    country default covers the whole country.
    """
    params: dict[str, str | float] = {"country_code": country_code}
    if location.is_device:
        params["lat"] = location.latitude
        params["lng"] = location.longitude
        params["radius"] = location.radius_km if location.radius_km is not None else radius_km
    return params


class ChargingProvider:
    """Charging stations for a country, optionally around the device."""

    category = Category.CHARGING

    def __init__(
        self,
        transport: Transport,
        registry: CountryRegistry = DEFAULT_REGISTRY,
        *,
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> None:
        self._transport = transport
        self._registry = registry
        self._radius_km = radius_km

    async def fetch(
        self,
        country_code: str,
        location: LocationContext,
        *,
        token: str | None = None,
    ) -> ProviderResult:
        params = build_charging_params(self._registry.code(country_code), location, radius_km=self._radius_km)
        return await fetch_result(self.category, self._transport, CHARGING_STATIONS_ENDPOINT, params, token=token)
