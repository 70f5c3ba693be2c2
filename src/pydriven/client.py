"""High-level async client for point-of-interest aggregation."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Any

import aiohttp

from pydriven._api.parking import ParkingProvider
from pydriven._transport import HttpTransport, TraceCallback
from pydriven.aggregation import AggregationOrchestrator, SnapshotListener
from pydriven.classify import StatusClassifier
from pydriven.config import DrivenConfig
from pydriven.countries import DEFAULT_REGISTRY, CountryRegistry
from pydriven.exceptions import DrivenError
from pydriven.ingestion.pois import PoiNormalizer
from pydriven.location import DeviceLocationSource, LocationResolver
from pydriven.models.location import LocationContext
from pydriven.models.poi import Category, PointOfInterest
from pydriven.models.results import AggregationSnapshot, CategoryError
from pydriven.projection import project
from pydriven.providers import ProviderClient, build_providers

_logger = logging.getLogger(__name__)


class DrivenClient:
    """Async client that aggregates parking, fuel, charging and camera data.

    Usage::

        async with DrivenClient(config) as client:
            snapshot = await client.refresh("Germany")
            points = client.visible_points({Category.PARKING, Category.CHARGING})

    The session token, when given, is forwarded as a bearer token on
    provider calls; it is never stored.
    """

    def __init__(
        self,
        config: DrivenConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        device_source: DeviceLocationSource | None = None,
        registry: CountryRegistry = DEFAULT_REGISTRY,
        on_snapshot: SnapshotListener | None = None,
        on_trace: TraceCallback | None = None,
    ) -> None:
        self._config = config or DrivenConfig()
        self._external_session = session is not None
        self._http_session = session
        self._registry = registry
        self._on_snapshot = on_snapshot
        self._on_trace = on_trace
        self._normalizer = PoiNormalizer(registry)
        self._classifier = StatusClassifier(self._config.thresholds)
        self._resolver = LocationResolver(
            registry,
            device_source=device_source,
            timeout=self._config.location_timeout,
            radius_km=self._config.charging_radius_km,
        )
        self._transport: HttpTransport | None = None
        self._providers: dict[Category, ProviderClient] = {}
        self._orchestrator: AggregationOrchestrator | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DrivenClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session, on_trace=self._on_trace)
        self._providers = build_providers(self._transport, self._config, self._registry)
        self._orchestrator = self.new_session(on_snapshot=self._on_snapshot)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._providers = {}
        self._orchestrator = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_orchestrator(self) -> AggregationOrchestrator:
        if self._orchestrator is None:
            raise DrivenError("Client not initialized. Use 'async with DrivenClient(...) as client:'")
        return self._orchestrator

    def _parking_provider(self) -> ParkingProvider:
        if self._transport is None:
            raise DrivenError("Client not initialized. Use 'async with DrivenClient(...) as client:'")
        provider = self._providers.get(Category.PARKING)
        if isinstance(provider, ParkingProvider):
            return provider
        return ParkingProvider(self._transport)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def config(self) -> DrivenConfig:
        return self._config

    @property
    def snapshot(self) -> AggregationSnapshot | None:
        """The latest published snapshot of the default session."""
        return self._orchestrator.snapshot if self._orchestrator is not None else None

    def new_session(self, *, on_snapshot: SnapshotListener | None = None) -> AggregationOrchestrator:
        """Create an independent orchestrator over this client's providers.

        Each session tracks its own cycles and snapshot, so several
        sessions can aggregate concurrently without superseding each other.
        """
        if self._transport is None:
            raise DrivenError("Client not initialized. Use 'async with DrivenClient(...) as client:'")
        return AggregationOrchestrator(
            self._providers,
            normalizer=self._normalizer,
            classifier=self._classifier,
            provider_timeout=self._config.provider_timeout,
            on_snapshot=on_snapshot,
        )

    async def resolve_location(self, country: str | None = None) -> LocationContext:
        """Resolve the query location for *country* (default from config)."""
        return await self._resolver.resolve(country or self._config.default_country)

    async def aggregate(
        self,
        country: str,
        location: LocationContext,
        *,
        categories: Collection[Category] | None = None,
        token: str | None = None,
    ) -> AggregationSnapshot | None:
        """Run one cycle on the default session for an explicit location."""
        orchestrator = self._require_orchestrator()
        return await orchestrator.aggregate(
            self._registry.code(country),
            location,
            categories=categories,
            token=token,
        )

    async def refresh(
        self,
        country: str | None = None,
        *,
        categories: Collection[Category] | None = None,
        token: str | None = None,
    ) -> AggregationSnapshot | None:
        """Resolve the location, then aggregate.

        The cycle is reserved before the location is resolved, so a slow
        device position cannot let this refresh overtake a later one.
        Returns ``None`` if a later ``refresh``/``aggregate`` superseded
        this one.
        """
        orchestrator = self._require_orchestrator()
        cycle = orchestrator.begin_cycle()
        location = await self.resolve_location(country)
        _logger.debug("Refreshing %s at %s (cycle %d)", location.country_code, location.source, cycle)
        return await orchestrator.aggregate(
            location.country_code,
            location,
            categories=categories,
            token=token,
            cycle=cycle,
        )

    def visible_points(
        self,
        categories: Collection[Category] | None = None,
        *,
        include_unresolved: bool = False,
    ) -> list[PointOfInterest]:
        """Project the latest snapshot onto *categories* (default: enabled)."""
        enabled = self._config.enabled_categories if categories is None else categories
        return project(self.snapshot, enabled, include_unresolved=include_unresolved)

    def errors(self) -> dict[Category, CategoryError]:
        """Per-category errors of the latest snapshot."""
        snapshot = self.snapshot
        if snapshot is None:
            return {}
        return {category: error for category, error in snapshot.per_category_error.items() if error is not None}

    async def get_parking_cities(self, *, token: str | None = None) -> list[str]:
        """City names covered by the parking provider."""
        return await self._parking_provider().list_cities(token=token)

    async def get_city_parking(
        self,
        city: str,
        *,
        token: str | None = None,
    ) -> tuple[list[PointOfInterest], CategoryError | None]:
        """Fetch, normalize and classify one city's parking facilities.

        Failures are returned as data, like in a snapshot.
        """
        result = await self._parking_provider().fetch_city(city, token=token)
        if not result.succeeded:
            return [], result.error
        points = self._normalizer.normalize(Category.PARKING, result.payload, city=city)
        return self._classifier.annotate(points), None
