"""pydriven - Async aggregation of nearby parking, fuel, charging and speed-camera data."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pydriven")
except PackageNotFoundError:
    __version__ = "0+local"
from pydriven.aggregation import AggregationOrchestrator
from pydriven.classify import StatusClassifier, annotate, classify
from pydriven.client import DrivenClient
from pydriven.config import ClassifierThresholds, DrivenConfig
from pydriven.countries import DEFAULT_REGISTRY, Country, CountryRegistry
from pydriven.exceptions import (
    DrivenConfigError,
    DrivenError,
    DrivenLocationError,
    DrivenProviderError,
    DrivenTransportError,
    MalformedRecordError,
)
from pydriven.ingestion.pois import PoiNormalizer, normalize
from pydriven.location import DeviceLocationSource, FixedDeviceLocation, LocationResolver
from pydriven.models import (
    CATEGORY_ORDER,
    AggregationSnapshot,
    Category,
    CategoryError,
    Coordinates,
    DevicePosition,
    ErrorKind,
    LocationContext,
    LocationSource,
    PointOfInterest,
    ProviderResult,
    Tier,
)
from pydriven.projection import category_counts, project, unresolved
from pydriven.providers import ProviderClient, build_providers

__all__ = [
    "__version__",
    "AggregationOrchestrator",
    "AggregationSnapshot",
    "CATEGORY_ORDER",
    "Category",
    "CategoryError",
    "ClassifierThresholds",
    "Coordinates",
    "Country",
    "CountryRegistry",
    "DEFAULT_REGISTRY",
    "DeviceLocationSource",
    "DevicePosition",
    "DrivenClient",
    "DrivenConfig",
    "DrivenConfigError",
    "DrivenError",
    "DrivenLocationError",
    "DrivenProviderError",
    "DrivenTransportError",
    "ErrorKind",
    "FixedDeviceLocation",
    "LocationContext",
    "LocationResolver",
    "LocationSource",
    "MalformedRecordError",
    "PoiNormalizer",
    "PointOfInterest",
    "ProviderClient",
    "ProviderResult",
    "StatusClassifier",
    "Tier",
    "annotate",
    "build_providers",
    "category_counts",
    "classify",
    "normalize",
    "project",
    "unresolved",
]
