"""Helpers for safe debug logging.

Both upstream APIs authenticate with opaque secrets: the board API takes
``key``/``token`` query parameters and the messaging API a bearer header.
This module strips them before requests are written to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

REDACTED = "<redacted>"

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "token",
        "apikey",
        "api_key",
        "password",
        "authorization",
        "cookie",
    }
)


def is_sensitive(key: str) -> bool:
    return key.lower() in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* safe for debug logs.

    Mappings (query params, headers, JSON replies) have sensitive keys
    masked and are walked recursively; anything else is logged as a string
    cut to *max_string* characters.
    """
    if isinstance(value, Mapping):
        return {
            str(k): REDACTED if is_sensitive(str(k)) else redact_for_log(v, max_string=max_string)
            for k, v in value.items()
        }
    text = value if isinstance(value, str) else repr(value)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text


def redact_url(url: str) -> str:
    """Replace sensitive query parameter values in *url*."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [(k, REDACTED if is_sensitive(k) else v) for k, v in parse_qsl(parts.query, keep_blank_values=True)]
    return urlunsplit(parts._replace(query=urlencode(query, safe="<>")))
