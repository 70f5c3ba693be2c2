"""Concurrent multi-provider aggregation.

This is the only component allowed to publish a snapshot.  Each call to
:meth:`AggregationOrchestrator.aggregate` starts a new cycle; all enabled
providers are fetched concurrently and joined before anything is
normalized.  If a newer cycle was requested while a cycle was in flight,
the older cycle's results are dropped on arrival (last request wins).
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable, Collection, Mapping
from datetime import datetime

from pydriven.classify import StatusClassifier
from pydriven.ingestion.pois import PoiNormalizer
from pydriven.models.location import LocationContext
from pydriven.models.poi import CATEGORY_ORDER, Category, PointOfInterest
from pydriven.models.results import AggregationSnapshot, CategoryError, ErrorKind, ProviderResult
from pydriven.providers import ProviderClient

_logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AggregationSnapshot], None]


class AggregationOrchestrator:
    """Fan-out/fan-in over the provider clients of one session.

    Independent sessions should use independent orchestrators; they may
    share provider clients (and therefore one HTTP transport).
    """

    def __init__(
        self,
        providers: Mapping[Category, ProviderClient],
        *,
        normalizer: PoiNormalizer | None = None,
        classifier: StatusClassifier | None = None,
        provider_timeout: float = 10.0,
        on_snapshot: SnapshotListener | None = None,
    ) -> None:
        self._providers = dict(providers)
        self._normalizer = normalizer or PoiNormalizer()
        self._classifier = classifier or StatusClassifier()
        self._provider_timeout = provider_timeout
        self._cycles = itertools.count(1)
        self._latest_cycle = 0
        self._snapshot: AggregationSnapshot | None = None
        self._listeners: list[SnapshotListener] = [on_snapshot] if on_snapshot is not None else []

    @property
    def snapshot(self) -> AggregationSnapshot | None:
        """The most recently published snapshot."""
        return self._snapshot

    @property
    def latest_cycle(self) -> int:
        """Identifier of the most recently requested cycle (0 before any)."""
        return self._latest_cycle

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(c for c in CATEGORY_ORDER if c in self._providers)

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def begin_cycle(self) -> int:
        """Reserve the identifier of a new cycle, superseding all earlier ones.

        Call this when the request is made, before any awaiting, so that
        request order rather than completion order decides which cycle wins.
        """
        cycle = next(self._cycles)
        self._latest_cycle = cycle
        return cycle

    def is_superseded(self, cycle: int) -> bool:
        return cycle != self._latest_cycle

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def _fetch_one(
        self,
        category: Category,
        country_code: str,
        location: LocationContext,
        token: str | None,
    ) -> ProviderResult:
        provider = self._providers[category]
        try:
            return await asyncio.wait_for(
                provider.fetch(country_code, location, token=token),
                self._provider_timeout,
            )
        except TimeoutError:
            _logger.warning("%s provider exceeded %.1fs", category, self._provider_timeout)
            return ProviderResult.failure(
                category,
                ErrorKind.TIMEOUT,
                f"{category} provider timed out after {self._provider_timeout:g}s",
            )

    def _points_for(
        self,
        category: Category,
        result: ProviderResult,
        country_code: str,
    ) -> tuple[tuple[PointOfInterest, ...], CategoryError | None]:
        if not result.succeeded:
            error = result.error or CategoryError(kind=ErrorKind.PROVIDER, message="provider failed")
            return (), error
        try:
            points = self._normalizer.normalize(category, result.payload, country_code=country_code)
            return tuple(self._classifier.annotate(points)), None
        except Exception as exc:
            _logger.exception("Normalizing %s payload failed", category)
            return (), CategoryError(kind=ErrorKind.INTERNAL, message=f"normalization failed: {exc}")

    async def run_cycle(
        self,
        country_code: str,
        location: LocationContext,
        *,
        categories: Collection[Category] | None = None,
        token: str | None = None,
        cycle: int = 0,
    ) -> AggregationSnapshot:
        """Fetch, normalize and classify every selected category.

        Does not publish.  Waits for every provider to settle; a failing
        provider only empties its own category.
        """
        selected = [c for c in self.categories if categories is None or c in categories]
        outcomes = await asyncio.gather(
            *(self._fetch_one(category, country_code, location, token) for category in selected),
            return_exceptions=True,
        )

        per_category: dict[Category, tuple[PointOfInterest, ...]] = {}
        per_category_error: dict[Category, CategoryError | None] = {}
        payload_timestamps: dict[Category, datetime | None] = {}
        for category, outcome in zip(selected, outcomes, strict=True):
            if isinstance(outcome, Exception):
                _logger.error("%s provider raised", category, exc_info=outcome)
                result = ProviderResult.failure(category, ErrorKind.INTERNAL, f"{type(outcome).__name__}: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result = outcome
            points, error = self._points_for(category, result, country_code)
            per_category[category] = points
            per_category_error[category] = error
            payload_timestamps[category] = result.payload_timestamp
            _logger.debug("Cycle %d %s: %d point(s), error=%s", cycle, category, len(points), error)

        return AggregationSnapshot(
            cycle=cycle,
            location=location,
            per_category=per_category,
            per_category_error=per_category_error,
            payload_timestamps=payload_timestamps,
        )

    async def aggregate(
        self,
        country_code: str,
        location: LocationContext,
        *,
        categories: Collection[Category] | None = None,
        token: str | None = None,
        cycle: int | None = None,
    ) -> AggregationSnapshot | None:
        """Run a cycle and publish its snapshot.

        *cycle* is an identifier reserved earlier with :meth:`begin_cycle`;
        without one a new cycle is started here.

        Returns ``None`` when a newer cycle was requested before this one
        settled; its results are discarded and the published snapshot is
        left untouched.
        """
        if cycle is None:
            cycle = self.begin_cycle()
        if self.is_superseded(cycle):
            _logger.debug("Cycle %d superseded by cycle %d before fetching", cycle, self._latest_cycle)
            return None
        snapshot = await self.run_cycle(
            country_code,
            location,
            categories=categories,
            token=token,
            cycle=cycle,
        )
        if self.is_superseded(cycle):
            _logger.debug("Discarding cycle %d, superseded by cycle %d", cycle, self._latest_cycle)
            return None
        self._publish(snapshot)
        return snapshot

    def _publish(self, snapshot: AggregationSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)
