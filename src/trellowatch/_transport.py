"""JSON-over-HTTP transport shared by the board and messaging clients."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from trellowatch._constants import USER_AGENT
from trellowatch._redact import redact_for_log, redact_url
from trellowatch.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        ...

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport returning decoded JSON bodies.

    Any network error, non-2xx status or undecodable body is raised as
    :class:`TransportError`.
    """

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float | None = None) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        return await self._request("GET", url, params=params)

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return await self._request("POST", url, payload=payload, headers=headers)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        safe_url = redact_url(url)
        _logger.debug(
            "%s %s params=%s headers=%s",
            method,
            safe_url,
            redact_for_log(dict(params or {})),
            redact_for_log(request_headers),
        )

        kwargs: dict[str, Any] = {"params": params, "headers": request_headers}
        if payload is not None:
            kwargs["json"] = dict(payload)
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            async with self._http.request(method, url, **kwargs) as resp:
                try:
                    text = await resp.text()
                except UnicodeDecodeError as exc:
                    raise TransportError(
                        f"Undecodable body from {safe_url}: {exc}",
                        status_code=resp.status,
                        url=safe_url,
                    ) from exc
                if not 200 <= resp.status < 300:
                    raise TransportError(
                        f"HTTP {resp.status} from {safe_url}: {text[:200]}",
                        status_code=resp.status,
                        url=safe_url,
                    )
        except TransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(f"Request to {safe_url} failed: {exc!r}", url=safe_url) from exc

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {safe_url}: {text[:200]}",
                status_code=resp.status,
                url=safe_url,
            ) from exc
