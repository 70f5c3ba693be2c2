"""Shared helpers for provider endpoint modules.

This module centralizes the repeated patterns:
- checking the ``{success, data, timestamp}`` envelope
- turning transport/provider/timeout failures into failed results

It is internal to pydriven and may change at any time.
"""

from __future__ import annotations

import logging
from typing import Any

from pydriven._transport import QueryParams, Transport
from pydriven.exceptions import DrivenProviderError, DrivenTransportError
from pydriven.models.poi import Category
from pydriven.models.results import ErrorKind, ProviderResult

_logger = logging.getLogger(__name__)


def check_envelope(endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
    """Return *body* if its envelope reports success.

    Only an explicit ``success: true`` counts; anything else is a
    provider failure even though the HTTP call itself succeeded.
    """
    if body.get("success") is True:
        return body
    message = str(body.get("error") or body.get("message") or "response did not report success")
    raise DrivenProviderError(
        f"{endpoint} failed: {message}",
        endpoint=endpoint,
        provider_message=message,
    )


async def get_envelope(
    transport: Transport,
    endpoint: str,
    params: QueryParams | None = None,
    *,
    token: str | None = None,
) -> dict[str, Any]:
    """GET *endpoint* and return the checked envelope (raises on failure)."""
    body = await transport.get_json(endpoint, params, token=token)
    return check_envelope(endpoint, body)


async def fetch_result(
    category: Category,
    transport: Transport,
    endpoint: str,
    params: QueryParams | None = None,
    *,
    token: str | None = None,
) -> ProviderResult:
    """Fetch one category and wrap the outcome in a :class:`ProviderResult`.

    Never raises for transport, provider or timeout failures; those become
    failed results carrying a :class:`~pydriven.models.CategoryError`.
    """
    try:
        envelope = await get_envelope(transport, endpoint, params, token=token)
    except DrivenTransportError as exc:
        _logger.warning("%s provider unreachable: %s", category, exc)
        return ProviderResult.failure(category, ErrorKind.TRANSPORT, str(exc), status_code=exc.status_code)
    except DrivenProviderError as exc:
        _logger.warning("%s provider reported failure: %s", category, exc.provider_message)
        return ProviderResult.failure(category, ErrorKind.PROVIDER, exc.provider_message)
    except TimeoutError:
        _logger.warning("%s provider timed out (%s)", category, endpoint)
        return ProviderResult.failure(category, ErrorKind.TIMEOUT, f"{endpoint} timed out")

    return ProviderResult.success(
        category,
        envelope.get("data"),
        payload_timestamp=envelope.get("timestamp"),
    )
