"""Fuel price endpoint.

Endpoint:
  - /api/gas/prices?country=<country name>
"""

from __future__ import annotations

from pydriven._api._common import fetch_result
from pydriven._constants import GAS_PRICES_ENDPOINT
from pydriven._transport import Transport
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.models.location import LocationContext
from pydriven.models.poi import Category
from pydriven.models.results import ProviderResult


class GasProvider:
    """Per-country fuel prices; queried by English country name."""

    category = Category.GAS

    def __init__(self, transport: Transport, registry: CountryRegistry = DEFAULT_REGISTRY) -> None:
        self._transport = transport
        self._registry = registry

    async def fetch(
        self,
        country_code: str,
        location: LocationContext,
        *,
        token: str | None = None,
    ) -> ProviderResult:
        params = {"country": self._registry.name(country_code)}
        return await fetch_result(self.category, self._transport, GAS_PRICES_ENDPOINT, params, token=token)
