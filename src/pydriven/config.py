"""Client configuration for pydriven."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Iterable
from typing import Any

from pydriven._constants import API_BASE_URL, DEFAULT_RADIUS_KM
from pydriven.exceptions import DrivenConfigError
from pydriven.models.poi import CATEGORY_ORDER, Category


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise DrivenConfigError(f"{env_key} must be a number, got {value!r}") from exc


def parse_categories(values: str | Iterable[str | Category]) -> frozenset[Category]:
    """Parse a category list (comma-separated string or iterable)."""
    items = values.split(",") if isinstance(values, str) else list(values)
    categories: set[Category] = set()
    for item in items:
        if isinstance(item, str) and not item.strip():
            continue
        try:
            categories.add(Category(item))
        except ValueError as exc:
            raise DrivenConfigError(f"Unknown category {item!r}") from exc
    return frozenset(categories)


@dataclasses.dataclass(frozen=True)
class ClassifierThresholds:
    """Tier thresholds.

    Parking ratios are compared strictly (``free/total > ratio``); fuel
    prices inclusively (``price <= low``, ``price >= high``), in the
    provider's native currency unit.
    """

    parking_available_ratio: float = 0.20
    parking_limited_ratio: float = 0.05
    gasoline_low: float = 1.4
    gasoline_high: float = 1.7
    diesel_low: float = 1.3
    diesel_high: float = 1.6

    def __post_init__(self) -> None:
        if not 0 <= self.parking_limited_ratio < self.parking_available_ratio:
            raise DrivenConfigError(
                "parking ratios must satisfy 0 <= limited < available, got "
                f"limited={self.parking_limited_ratio} available={self.parking_available_ratio}"
            )
        for fuel in ("gasoline", "diesel"):
            low, high = self.price_band(fuel)
            if low >= high:
                raise DrivenConfigError(f"{fuel} thresholds must satisfy low < high, got {low} >= {high}")

    def price_band(self, fuel: str) -> tuple[float, float]:
        """Return ``(low, high)`` for *fuel*; unknown fuels use gasoline."""
        if fuel == "diesel":
            return self.diesel_low, self.diesel_high
        return self.gasoline_low, self.gasoline_high


@dataclasses.dataclass(frozen=True)
class DrivenConfig:
    """Client configuration.

    Parameters
    ----------
    api_base_url : str
        Base URL of the data backend; endpoint paths start with ``/api``.
    default_country : str
        Country used when none is given (code or name).
    enabled_categories : frozenset[Category]
        Categories fetched by each aggregation cycle.
    provider_timeout : float
        Upper bound in seconds for one provider call.  Expiry counts as
        a provider failure.
    location_timeout : float
        Upper bound in seconds for the device position request.
    charging_radius_km : float
        Radius sent with charging queries for device-sourced locations.
    api_trace_enabled : bool
        Log every provider request/response (redacted) at DEBUG level.
    thresholds : ClassifierThresholds
        Tier thresholds.
    """

    api_base_url: str = API_BASE_URL
    default_country: str = "DE"
    enabled_categories: frozenset[Category] = frozenset(CATEGORY_ORDER)
    provider_timeout: float = 10.0
    location_timeout: float = 10.0
    charging_radius_km: float = DEFAULT_RADIUS_KM
    api_trace_enabled: bool = False
    thresholds: ClassifierThresholds = dataclasses.field(default_factory=ClassifierThresholds)

    def __post_init__(self) -> None:
        if self.provider_timeout <= 0:
            raise DrivenConfigError(f"provider_timeout must be positive, got {self.provider_timeout}")
        if self.location_timeout < 0:
            raise DrivenConfigError(f"location_timeout must not be negative, got {self.location_timeout}")
        if self.charging_radius_km <= 0:
            raise DrivenConfigError(f"charging_radius_km must be positive, got {self.charging_radius_km}")
        # Accept any iterable of names/categories for convenience.
        if not isinstance(self.enabled_categories, frozenset) or not all(
            isinstance(item, Category) for item in self.enabled_categories
        ):
            object.__setattr__(self, "enabled_categories", parse_categories(self.enabled_categories))
        object.__setattr__(self, "api_base_url", self.api_base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> DrivenConfig:
        """Create configuration from environment variables.

        Reads optional ``DRIVEN_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        DrivenConfig
            Populated configuration.
        """
        env = os.environ

        threshold_kwargs: dict[str, float] = {}
        _ENV_THRESHOLD_MAP = {
            "DRIVEN_PARKING_AVAILABLE_RATIO": "parking_available_ratio",
            "DRIVEN_PARKING_LIMITED_RATIO": "parking_limited_ratio",
            "DRIVEN_GASOLINE_LOW": "gasoline_low",
            "DRIVEN_GASOLINE_HIGH": "gasoline_high",
            "DRIVEN_DIESEL_LOW": "diesel_low",
            "DRIVEN_DIESEL_HIGH": "diesel_high",
        }
        for env_key, field_name in _ENV_THRESHOLD_MAP.items():
            val = env.get(env_key)
            if val is not None:
                threshold_kwargs[field_name] = _env_float(env_key, val)

        # Allow overriding thresholds via a nested dict
        threshold_overrides = overrides.pop("thresholds", None)
        if isinstance(threshold_overrides, dict):
            threshold_kwargs.update(threshold_overrides)
        elif isinstance(threshold_overrides, ClassifierThresholds):
            threshold_kwargs = dataclasses.asdict(threshold_overrides)

        config_kwargs: dict[str, Any] = {"thresholds": ClassifierThresholds(**threshold_kwargs)}

        _ENV_CONFIG_MAP = {
            "DRIVEN_API_BASE_URL": "api_base_url",
            "DRIVEN_DEFAULT_COUNTRY": "default_country",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "DRIVEN_PROVIDER_TIMEOUT": "provider_timeout",
            "DRIVEN_LOCATION_TIMEOUT": "location_timeout",
            "DRIVEN_CHARGING_RADIUS_KM": "charging_radius_km",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        categories_env = env.get("DRIVEN_ENABLED_CATEGORIES")
        if categories_env is not None and "enabled_categories" not in overrides:
            config_kwargs["enabled_categories"] = parse_categories(categories_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("DRIVEN_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
