"""Static country table.

Maps a country identifier (English name or ISO 3166-1 alpha-2 code) to its
code and a representative ``(longitude, latitude)`` point used when no
device position is available.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Country:
    """A supported country.

    Parameters
    ----------
    name : str
        English name, as providers expect it in ``country=`` queries.
    code : str
        ISO 3166-1 alpha-2 code.
    centroid : tuple[float, float]
        Fallback ``(longitude, latitude)``.
    """

    name: str
    code: str
    centroid: tuple[float, float]


COUNTRIES: tuple[Country, ...] = (
    Country("Germany", "DE", (13.4050, 52.5200)),
    Country("France", "FR", (2.3522, 48.8566)),
    Country("Italy", "IT", (12.4964, 41.9028)),
    Country("Spain", "ES", (-3.7038, 40.4168)),
    Country("Netherlands", "NL", (4.9041, 52.3676)),
    Country("Belgium", "BE", (4.3517, 50.8503)),
    Country("Switzerland", "CH", (7.4474, 46.9480)),
    Country("Austria", "AT", (16.3738, 48.2082)),
    Country("Denmark", "DK", (12.5683, 55.6761)),
    Country("Sweden", "SE", (18.0686, 59.3293)),
    Country("Norway", "NO", (10.7522, 59.9139)),
    Country("Finland", "FI", (24.9384, 60.1699)),
    Country("Poland", "PL", (21.0122, 52.2297)),
    Country("Czech Republic", "CZ", (14.4378, 50.0755)),
    Country("Hungary", "HU", (19.0402, 47.4979)),
    Country("Portugal", "PT", (-9.1393, 38.7223)),
    Country("Greece", "GR", (23.7275, 37.9838)),
)

DEFAULT_COUNTRY_CODE = "DE"


class CountryRegistry:
    """Lookup table over a fixed set of countries.

    Lookups accept either the code or the name, case-insensitively.
    """

    def __init__(self, countries: Iterable[Country] = COUNTRIES, *, default_code: str = DEFAULT_COUNTRY_CODE) -> None:
        self._countries: tuple[Country, ...] = tuple(countries)
        self._index: dict[str, Country] = {}
        for country in self._countries:
            self._index[country.code.lower()] = country
            self._index[country.name.lower()] = country
        default = self._index.get(default_code.strip().lower())
        if default is None:
            raise ValueError(f"default country {default_code!r} is not in the registry")
        self._default = default

    def __iter__(self) -> Iterator[Country]:
        return iter(self._countries)

    def __len__(self) -> int:
        return len(self._countries)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.get(identifier) is not None

    @property
    def default(self) -> Country:
        return self._default

    def get(self, identifier: str | None) -> Country | None:
        """Return the matching country, or ``None``."""
        if not identifier:
            return None
        return self._index.get(identifier.strip().lower())

    def resolve(self, identifier: str | None) -> Country:
        """Return the matching country, falling back to the default one."""
        country = self.get(identifier)
        if country is None:
            _logger.warning("Unknown country %r, using %s", identifier, self._default.code)
            return self._default
        return country

    def code(self, identifier: str | None) -> str:
        return self.resolve(identifier).code

    def name(self, identifier: str | None) -> str:
        return self.resolve(identifier).name

    def centroid(self, identifier: str | None) -> tuple[float, float]:
        """Return the fallback ``(longitude, latitude)`` of a country."""
        return self.resolve(identifier).centroid


DEFAULT_REGISTRY = CountryRegistry()
