"""Custom exception hierarchy for pydriven."""

from __future__ import annotations


class DrivenError(Exception):
    """Base exception for all pydriven errors."""


class DrivenConfigError(DrivenError):
    """Invalid or missing configuration."""


class DrivenTransportError(DrivenError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class DrivenProviderError(DrivenError):
    """Provider answered, but its envelope reports ``success: false``."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
        provider_message: str = "",
    ) -> None:
        self.endpoint = endpoint
        self.provider_message = provider_message
        super().__init__(message)


class MalformedRecordError(DrivenError):
    """A single record inside a successful payload has the wrong shape.

    Raised by the record parsers and caught by the normalization layer,
    which drops the record and keeps going.
    """

    def __init__(self, message: str, *, record: object = None) -> None:
        self.record = record
        super().__init__(message)


class DrivenLocationError(DrivenError):
    """Device position was denied or is unavailable."""
