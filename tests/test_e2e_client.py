from __future__ import annotations

# pylint: disable=redefined-outer-name

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from pydriven.client import DrivenClient
from pydriven.config import DrivenConfig
from pydriven.exceptions import DrivenError, DrivenLocationError
from pydriven.location import FixedDeviceLocation
from pydriven.models import AggregationSnapshot, Category, DevicePosition, ErrorKind, LocationSource, Tier


@dataclass
class FakeDrivenBackend:
    """In-process HTTP backend serving the provider endpoints."""

    camera_status: int = 500
    gas_body: str | None = None
    raw_bodies: dict[str, bytes] = field(default_factory=dict)
    requests: list[tuple[str, dict[str, str], str | None]] = field(default_factory=list)

    def _record(self, request: web.Request) -> None:
        self.requests.append((request.path, dict(request.query), request.headers.get("Authorization")))

    async def parking_all(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.json_response(
            {
                "success": True,
                "timestamp": 1_700_000_000_000,
                "data": {
                    "Berlin": [
                        {
                            "id": "P1",
                            "name": "Alexanderplatz",
                            "coordinates": [13.41, 52.52],
                            "free_spots": 3,
                            "total_spots": 120,
                        }
                    ],
                    "Zurich": [{"name": "Urania", "free_spots": 80, "total_spots": 100}],
                },
            }
        )

    async def parking_cities(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.json_response({"success": True, "cities": ["Berlin", "Zurich"]})

    async def parking_city(self, request: web.Request) -> web.Response:
        self._record(request)
        city = request.match_info["city"]
        if request.path in self.raw_bodies:
            return web.Response(body=self.raw_bodies[request.path], content_type="application/json")
        if city != "Zurich":
            return web.json_response({"success": False, "error": f"Unknown city {city}"})
        return web.json_response({"success": True, "data": [{"name": "Urania", "free_spots": 10, "total_spots": 100}]})

    async def gas_prices(self, request: web.Request) -> web.Response:
        self._record(request)
        if request.path in self.raw_bodies:
            return web.Response(body=self.raw_bodies[request.path], content_type="application/json")
        if self.gas_body is not None:
            return web.Response(text=self.gas_body, content_type="text/plain")
        return web.json_response(
            {
                "success": True,
                "data": [{"country": request.query.get("country"), "currency": "EUR", "gasoline": 1.62, "diesel": 1.29}],
            }
        )

    async def charging_stations(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.json_response(
            {
                "success": True,
                "data": [
                    {"ID": 1, "name": "Odeonsplatz", "lat": 48.142, "lng": 11.577, "status": "In Use"},
                    {"ID": 2, "name": "Broken", "coordinates": [0, 0], "status": "Out of Service"},
                ],
            }
        )

    async def speed_cameras(self, request: web.Request) -> web.Response:
        self._record(request)
        if self.camera_status != 200:
            return web.Response(status=self.camera_status, text="upstream exploded")
        return web.json_response({"success": True, "data": [{"id": "S1", "name": "B2", "lat": 48.1, "lng": 11.6}]})

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/parking/all", self.parking_all)
        app.router.add_get("/api/parking/cities", self.parking_cities)
        app.router.add_get("/api/parking/{city}", self.parking_city)
        app.router.add_get("/api/gas/prices", self.gas_prices)
        app.router.add_get("/api/charging/stations", self.charging_stations)
        app.router.add_get("/api/speed-cameras", self.speed_cameras)
        return app


class SlowThenDeniedLocation:
    """Device source whose first request is slow and every later one denied."""

    def __init__(self, delay: float) -> None:
        self._delay = delay
        self.requests = 0

    async def request_position(self) -> DevicePosition:
        self.requests += 1
        if self.requests == 1:
            await asyncio.sleep(self._delay)
            return DevicePosition(latitude=48.857, longitude=2.352)
        raise DrivenLocationError("permission denied")


@pytest.fixture
def backend() -> FakeDrivenBackend:
    return FakeDrivenBackend()


@pytest_asyncio.fixture
async def server(backend: FakeDrivenBackend) -> AsyncIterator[TestServer]:
    async with TestServer(backend.app()) as test_server:
        yield test_server


@pytest.fixture
def config(server: TestServer) -> DrivenConfig:
    return DrivenConfig(api_base_url=str(server.make_url("")), provider_timeout=5.0, api_trace_enabled=True)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_refresh_with_device_location(config: DrivenConfig, backend: FakeDrivenBackend) -> None:
    published: list[AggregationSnapshot] = []
    traces: list[tuple[str, Any]] = []

    async with DrivenClient(
        config,
        device_source=FixedDeviceLocation(48.137, 11.575),
        on_snapshot=published.append,
        on_trace=lambda stage, data: traces.append((stage, data)),
    ) as client:
        snapshot = await client.refresh("Germany", token="session-123")

        assert snapshot is not None
        assert published == [snapshot]
        assert client.snapshot is snapshot
        assert snapshot.location.source == LocationSource.DEVICE

        parking = {p.name: p for p in snapshot.points(Category.PARKING)}
        assert parking["Alexanderplatz"].tier == Tier.FULL
        assert parking["Urania"].tier == Tier.AVAILABLE
        assert parking["Urania"].country_code == "CH"
        assert parking["Urania"].coordinates is not None

        [gas] = snapshot.points(Category.GAS)
        assert gas.name == "Germany"
        assert gas.tier == Tier.MODERATE
        assert gas.attributes["diesel_tier"] == "low"
        assert gas.attributes["gasoline_display"] == "1.620"

        charging = snapshot.points(Category.CHARGING)
        assert [p.tier for p in charging] == [Tier.IN_USE, Tier.OUT_OF_SERVICE]

        error = snapshot.error(Category.SPEED_CAMERA)
        assert error is not None
        assert error.kind == ErrorKind.TRANSPORT
        assert error.status_code == 500
        assert snapshot.points(Category.SPEED_CAMERA) == ()

        visible = client.visible_points()
        assert [p.category for p in visible] == [
            Category.PARKING,
            Category.PARKING,
            Category.CHARGING,
        ]
        assert [p.name for p in client.visible_points({Category.CHARGING}, include_unresolved=True)] == [
            "Odeonsplatz",
            "Broken",
        ]
        assert set(client.errors()) == {Category.SPEED_CAMERA}

    requests = {path: (query, auth) for path, query, auth in backend.requests}
    assert requests["/api/gas/prices"] == ({"country": "Germany"}, "Bearer session-123")
    charging_query, _ = requests["/api/charging/stations"]
    assert float(charging_query.pop("radius")) == 50
    assert charging_query == {"country_code": "DE", "lat": "48.137", "lng": "11.575"}
    camera_query, _ = requests["/api/speed-cameras"]
    assert camera_query["country"] == "Germany"

    # The bearer token never reaches the trace output.
    assert traces
    assert all("session-123" not in repr(data) for _, data in traces)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_country_default_skips_radius(config: DrivenConfig, backend: FakeDrivenBackend) -> None:
    async with DrivenClient(config) as client:
        snapshot = await client.refresh("FR", categories={Category.CHARGING})

    assert snapshot is not None
    assert snapshot.location.source == LocationSource.COUNTRY_DEFAULT
    assert [path for path, _, _ in backend.requests] == ["/api/charging/stations"]
    assert backend.requests[0][1] == {"country_code": "FR"}
    assert backend.requests[0][2] is None


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_invalid_json_is_a_transport_error(config: DrivenConfig, backend: FakeDrivenBackend) -> None:
    backend.gas_body = "<html>maintenance</html>"

    async with DrivenClient(config) as client:
        snapshot = await client.refresh("DE", categories={Category.GAS, Category.PARKING})

    assert snapshot is not None
    error = snapshot.error(Category.GAS)
    assert error is not None
    assert error.kind == ErrorKind.TRANSPORT
    assert len(snapshot.points(Category.PARKING)) == 2


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_invalid_utf8_is_a_transport_error(config: DrivenConfig, backend: FakeDrivenBackend) -> None:
    backend.raw_bodies["/api/parking/Berlin"] = b'{"success": true, "data": ["\xff\xfe"]}'
    backend.raw_bodies["/api/gas/prices"] = b'{"success": true, "data": [{"country": "\xc3\x28"}]}'

    async with DrivenClient(config) as client:
        points, error = await client.get_city_parking("Berlin")
        assert points == []
        assert error is not None
        assert error.kind == ErrorKind.TRANSPORT

        snapshot = await client.refresh("DE", categories={Category.GAS, Category.PARKING})

    assert snapshot is not None
    gas_error = snapshot.error(Category.GAS)
    assert gas_error is not None
    assert gas_error.kind == ErrorKind.TRANSPORT
    assert len(snapshot.points(Category.PARKING)) == 2


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_later_refresh_wins_over_slow_location(config: DrivenConfig, backend: FakeDrivenBackend) -> None:
    device = SlowThenDeniedLocation(0.2)
    published: list[AggregationSnapshot] = []

    async with DrivenClient(config, device_source=device, on_snapshot=published.append) as client:
        first = asyncio.create_task(client.refresh("France", categories={Category.GAS}))
        await asyncio.sleep(0.01)
        second = await client.refresh("Italy", categories={Category.GAS})
        first_result = await first

        assert device.requests == 2
        assert first_result is None
        assert second is not None
        assert second.location.source == LocationSource.COUNTRY_DEFAULT
        assert client.snapshot is second
        assert client.snapshot.country_code == "IT"
        assert published == [second]

    # The superseded refresh never reached the providers.
    assert [query["country"] for path, query, _ in backend.requests if path == "/api/gas/prices"] == ["Italy"]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_parking_cities(config: DrivenConfig) -> None:
    async with DrivenClient(config) as client:
        assert await client.get_parking_cities() == ["Berlin", "Zurich"]

        points, error = await client.get_city_parking("Zurich")
        assert error is None
        assert [p.name for p in points] == ["Urania"]
        assert points[0].tier == Tier.LIMITED
        assert points[0].attributes["city"] == "Zurich"

        points, error = await client.get_city_parking("Atlantis")
        assert points == []
        assert error is not None
        assert error.kind == ErrorKind.PROVIDER


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_independent_sessions(config: DrivenConfig) -> None:
    async with DrivenClient(config) as client:
        other = client.new_session()
        germany = await client.resolve_location("DE")
        france = await client.resolve_location("FR")

        mine = await client.aggregate("DE", germany, categories={Category.GAS})
        theirs = await other.aggregate("FR", france, categories={Category.GAS})

        assert mine is not None and theirs is not None
        assert client.snapshot is mine
        assert other.snapshot is theirs
        assert mine.points(Category.GAS)[0].name == "Germany"
        assert theirs.points(Category.GAS)[0].name == "France"


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_borrowed_session_stays_open(config: DrivenConfig) -> None:
    async with aiohttp.ClientSession() as session:
        async with DrivenClient(config, session=session) as client:
            await client.refresh("DE", categories={Category.PARKING})
        assert not session.closed


@pytest.mark.asyncio
async def test_client_requires_context_manager() -> None:
    client = DrivenClient(DrivenConfig())

    assert client.snapshot is None
    assert client.visible_points() == []
    with pytest.raises(DrivenError):
        await client.refresh("DE")
    with pytest.raises(DrivenError):
        await client.get_parking_cities()
