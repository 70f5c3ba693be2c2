"""Helpers for safe debug logging.

Provider calls may carry an opaque session token that belongs to the
caller.  This module scrubs it (and similar credentials) from
request/response data before it is emitted in DEBUG logs or handed to a
trace callback.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "token",
        "session_token",
        "access_token",
        "refresh_token",
        "api_key",
        "apikey",
        "cookie",
        "password",
    }
)

# Credentials embedded in free text, e.g. an echoed header or a query string.
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[^\s,;\"']+")
_QUERY_SECRET_RE = re.compile(r"(?i)([?&](?:token|api_?key|access_token)=)[^&#\s]+")

_MAX_DEPTH = 20


def _scrub_text(text: str, max_string: int) -> str:
    text = _BEARER_RE.sub(f"Bearer {REDACTED}", text)
    text = _QUERY_SECRET_RE.sub(rf"\1{REDACTED}", text)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Values under credential-like keys are replaced outright; bearer tokens
    and token query parameters inside strings are masked.  Long strings are
    truncated and long sequences are cut to *max_items* entries, since
    provider payloads can hold thousands of records.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _scrub_text(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    def nested(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)

    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if str(key).lower() in _SENSITIVE_KEYS else nested(item)
            for key, item in value.items()
        }
    if isinstance(value, Sequence):
        items = [nested(item) for item in list(value)[:max_items]]
        if len(value) > max_items:
            items.append(f"<{len(value) - max_items} more>")
        return items
    return repr(value)
