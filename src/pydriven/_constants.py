"""Internal constants shared across the library."""

API_BASE_URL = "http://localhost:5000"
USER_AGENT = "pydriven/1 (+aiohttp)"

# Bounded-radius query used for device-sourced locations (km).
DEFAULT_RADIUS_KM = 50

# ------------------------------------------------------------------
# Provider endpoints
# ------------------------------------------------------------------

PARKING_ALL_ENDPOINT = "/api/parking/all"
PARKING_CITIES_ENDPOINT = "/api/parking/cities"
PARKING_CITY_ENDPOINT = "/api/parking/{city}"
GAS_PRICES_ENDPOINT = "/api/gas/prices"
CHARGING_STATIONS_ENDPOINT = "/api/charging/stations"
SPEED_CAMERAS_ENDPOINT = "/api/speed-cameras"

# ------------------------------------------------------------------
# Parking city centroids, (longitude, latitude)
# ------------------------------------------------------------------

CITY_CENTROIDS: dict[str, tuple[float, float]] = {
    "Basel": (7.5886, 47.5596),
    "Zurich": (8.5417, 47.3769),
    "Freiburg": (7.8421, 47.9990),
    "Hamburg": (9.9937, 53.5511),
    "Dresden": (13.7373, 51.0504),
    "Berlin": (13.4050, 52.5200),
    "Munich": (11.5820, 48.1351),
}

CITY_COUNTRY_CODES: dict[str, str] = {
    "Basel": "CH",
    "Zurich": "CH",
    "Freiburg": "DE",
    "Hamburg": "DE",
    "Dresden": "DE",
    "Berlin": "DE",
    "Munich": "DE",
}


def city_centroid(city: str | None) -> tuple[float, float] | None:
    """Return the known ``(longitude, latitude)`` centroid for *city*, if any."""
    if not city:
        return None
    return CITY_CENTROIDS.get(city.strip())
