"""Provider client interface and registry."""

from __future__ import annotations

from typing import Protocol

from pydriven._api.charging import ChargingProvider
from pydriven._api.gas import GasProvider
from pydriven._api.parking import ParkingProvider
from pydriven._api.speed_cameras import SpeedCameraProvider
from pydriven._transport import Transport
from pydriven.config import DrivenConfig
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.models.location import LocationContext
from pydriven.models.poi import CATEGORY_ORDER, Category
from pydriven.models.results import ProviderResult


class ProviderClient(Protocol):
    """One data source.

    ``fetch`` reports failure through the returned result; it does not
    raise for transport, provider or timeout errors.
    """

    category: Category

    async def fetch(
        self,
        country_code: str,
        location: LocationContext,
        *,
        token: str | None = None,
    ) -> ProviderResult:
        ...


def build_providers(
    transport: Transport,
    config: DrivenConfig,
    registry: CountryRegistry = DEFAULT_REGISTRY,
) -> dict[Category, ProviderClient]:
    """Return the enabled providers keyed by category, in fixed order."""
    available: dict[Category, ProviderClient] = {
        Category.PARKING: ParkingProvider(transport),
        Category.GAS: GasProvider(transport, registry),
        Category.CHARGING: ChargingProvider(transport, registry, radius_km=config.charging_radius_km),
        Category.SPEED_CAMERA: SpeedCameraProvider(transport, registry),
    }
    return {category: available[category] for category in CATEGORY_ORDER if category in config.enabled_categories}
