"""Data models for provider payloads and aggregation results."""

from pydriven.models._base import DrivenBaseModel, DrivenEnum, EpochTimestamp, parse_epoch_timestamp
from pydriven.models.location import DevicePosition, LocationContext, LocationSource
from pydriven.models.poi import CATEGORY_ORDER, Category, Coordinates, PointOfInterest, Tier
from pydriven.models.records import ChargingStationRecord, GasPriceRecord, ParkingRecord, SpeedCameraRecord
from pydriven.models.results import AggregationSnapshot, CategoryError, ErrorKind, ProviderResult

__all__ = [
    "AggregationSnapshot",
    "CATEGORY_ORDER",
    "Category",
    "CategoryError",
    "ChargingStationRecord",
    "Coordinates",
    "DevicePosition",
    "DrivenBaseModel",
    "DrivenEnum",
    "EpochTimestamp",
    "ErrorKind",
    "GasPriceRecord",
    "LocationContext",
    "LocationSource",
    "ParkingRecord",
    "PointOfInterest",
    "ProviderResult",
    "SpeedCameraRecord",
    "Tier",
    "parse_epoch_timestamp",
]
