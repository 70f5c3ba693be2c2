"""Query location resolution.

Prefers the device position when it arrives within a bounded wait and
falls back to the selected country's centroid otherwise.  Resolution
never fails; callers inspect :attr:`LocationContext.source` to decide
whether a radius-bound query makes sense.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pydriven._constants import DEFAULT_RADIUS_KM
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.exceptions import DrivenLocationError
from pydriven.models.location import DevicePosition, LocationContext

_logger = logging.getLogger(__name__)


class DeviceLocationSource(Protocol):
    """One-shot device position request.

    Raises :class:`~pydriven.exceptions.DrivenLocationError` when the
    position is denied or unavailable.
    """

    async def request_position(self) -> DevicePosition:
        ...


class FixedDeviceLocation:
    """Device source that always reports the same position."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self._position = DevicePosition(latitude=latitude, longitude=longitude)

    async def request_position(self) -> DevicePosition:
        return self._position


class LocationResolver:
    """Resolve the coordinate used for an aggregation cycle."""

    def __init__(
        self,
        registry: CountryRegistry = DEFAULT_REGISTRY,
        *,
        device_source: DeviceLocationSource | None = None,
        timeout: float = 10.0,
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> None:
        self._registry = registry
        self._device_source = device_source
        self._timeout = timeout
        self._radius_km = radius_km

    async def _device_position(self) -> DevicePosition | None:
        if self._device_source is None:
            return None
        try:
            position = await asyncio.wait_for(self._device_source.request_position(), self._timeout)
        except TimeoutError:
            _logger.info("Device position not available within %.1fs, using country default", self._timeout)
            return None
        except DrivenLocationError as exc:
            _logger.info("Device position unavailable (%s), using country default", exc)
            return None
        if not position.is_usable:
            _logger.debug("Ignoring unusable device position %s", position)
            return None
        return position

    async def resolve(self, country: str | None) -> LocationContext:
        """Return the device location or the country centroid."""
        country_code = self._registry.code(country)
        position = await self._device_position()
        if position is not None:
            return LocationContext.from_device(position, country_code, radius_km=self._radius_km)
        return LocationContext.country_default(self._registry.centroid(country_code), country_code)
