"""HTTP transport for the provider backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from pydriven._constants import USER_AGENT
from pydriven._redact import redact_for_log
from pydriven.config import DrivenConfig
from pydriven.exceptions import DrivenTransportError

_logger = logging.getLogger(__name__)

QueryParams = Mapping[str, str | int | float]
TraceCallback = Callable[[str, Mapping[str, Any]], None]


class Transport(Protocol):
    """Structural transport interface used by provider modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(
        self,
        endpoint: str,
        params: QueryParams | None = None,
        *,
        token: str | None = None,
    ) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp transport returning decoded JSON envelopes."""

    def __init__(
        self,
        config: DrivenConfig,
        http_session: aiohttp.ClientSession,
        *,
        on_trace: TraceCallback | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.provider_timeout)
        self._on_trace = on_trace

    def _trace(self, stage: str, data: Mapping[str, Any]) -> None:
        if not self._config.api_trace_enabled:
            return
        redacted = redact_for_log(data)
        _logger.debug("API %s %s", stage, redacted)
        if self._on_trace is not None:
            self._on_trace(stage, redacted)

    async def get_json(
        self,
        endpoint: str,
        params: QueryParams | None = None,
        *,
        token: str | None = None,
    ) -> dict[str, Any]:
        """GET *endpoint* and return the decoded JSON object.

        Raises
        ------
        DrivenTransportError
            On connection failure, non-200 status, or a body that is not a
            UTF-8 encoded JSON object.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if token:
            headers["authorization"] = f"Bearer {token}"

        url = f"{self._config.api_base_url}{endpoint}"
        query = {key: str(value) for key, value in (params or {}).items()}

        _logger.debug("GET %s params=%s", url, query)
        self._trace("request", {"url": url, "params": query, "headers": headers})

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                raw = await resp.read()
                text = raw.decode("utf-8", errors="replace")
                if resp.status != 200:
                    raise DrivenTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except DrivenTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise DrivenTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body: Any = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DrivenTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=200,
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise DrivenTransportError(
                f"Expected a JSON object from {endpoint}, got {type(body).__name__}",
                status_code=200,
                endpoint=endpoint,
            )

        self._trace("response", {"endpoint": endpoint, "body": body})
        return body
