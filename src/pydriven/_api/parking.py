"""Parking endpoints.

Endpoints:
  - /api/parking/all (every city, keyed by city name)
  - /api/parking/cities (supported city names)
  - /api/parking/{city} (single city)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydriven._api._common import fetch_result, get_envelope
from pydriven._constants import PARKING_ALL_ENDPOINT, PARKING_CITIES_ENDPOINT, PARKING_CITY_ENDPOINT
from pydriven._transport import Transport
from pydriven.models.location import LocationContext
from pydriven.models.poi import Category
from pydriven.models.results import ProviderResult

_logger = logging.getLogger(__name__)


class ParkingProvider:
    """Parking availability across all supported cities.

    The all-cities endpoint takes no query parameters; country and
    location do not narrow it.
    """

    category = Category.PARKING

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def fetch(
        self,
        country_code: str,
        location: LocationContext,
        *,
        token: str | None = None,
    ) -> ProviderResult:
        return await fetch_result(self.category, self._transport, PARKING_ALL_ENDPOINT, token=token)

    async def fetch_city(self, city: str, *, token: str | None = None) -> ProviderResult:
        """Fetch a single city; the payload is a flat list of locations."""
        endpoint = PARKING_CITY_ENDPOINT.format(city=quote(city.strip(), safe=""))
        return await fetch_result(self.category, self._transport, endpoint, token=token)

    async def list_cities(self, *, token: str | None = None) -> list[str]:
        """Return the city names the provider covers.

        Raises
        ------
        DrivenTransportError
            If the backend cannot be reached.
        DrivenProviderError
            If the provider reports failure.
        """
        envelope = await get_envelope(self._transport, PARKING_CITIES_ENDPOINT, token=token)
        cities: Any = envelope.get("cities")
        if not isinstance(cities, list):
            _logger.debug("Parking cities payload is not a list: %r", type(cities).__name__)
            return []
        return [str(city) for city in cities if isinstance(city, str) and city.strip()]
