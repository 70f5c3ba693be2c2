"""Speed camera endpoint.

Endpoint:
  - /api/speed-cameras?country=<country name>&lat=&lng=
"""

from __future__ import annotations

from pydriven._api._common import fetch_result
from pydriven._constants import SPEED_CAMERAS_ENDPOINT
from pydriven._transport import Transport
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.models.location import LocationContext
from pydriven.models.poi import Category
from pydriven.models.results import ProviderResult


class SpeedCameraProvider:
    """Speed cameras near the query location."""

    category = Category.SPEED_CAMERA

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
        params = {
            "country": self._registry.name(country_code),
            "lat": location.latitude,
            "lng": location.longitude,
        }
        return await fetch_result(self.category, self._transport, SPEED_CAMERAS_ENDPOINT, params, token=token)
