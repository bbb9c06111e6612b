"""Liveness endpoint served with ``aiohttp.web``."""

from __future__ import annotations

import logging

from aiohttp import web

from trellowatch._constants import HEALTH_PATH, RUNNING_TEXT
from trellowatch.config import MonitorConfig

_logger = logging.getLogger(__name__)

_SERVICE_NAME_KEY = web.AppKey("service_name", str)


async def _health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "service": request.app[_SERVICE_NAME_KEY]})


async def _running(_request: web.Request) -> web.Response:
    return web.Response(text=RUNNING_TEXT)


def create_app(service_name: str) -> web.Application:
    """Build the liveness application.

    ``GET /health`` answers with a JSON status; every other request gets a
    plain-text acknowledgment.
    """
    app = web.Application()
    app[_SERVICE_NAME_KEY] = service_name
    app.router.add_get(HEALTH_PATH, _health)
    app.router.add_route("*", "/{tail:.*}", _running)
    return app


class HealthServer:
    """Runs :func:`create_app` on ``config.port`` next to the poll loop."""

    def __init__(self, config: MonitorConfig, *, host: str = "0.0.0.0") -> None:
        self._config = config
        self._host = host
        self._runner: web.AppRunner | None = None

    @property
    def running(self) -> bool:
        return self._runner is not None

    async def start(self) -> None:
        if self._runner is not None:
            return
        runner = web.AppRunner(create_app(self._config.service_name), access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self._host, self._config.port)
        await site.start()
        self._runner = runner
        _logger.info("Health server listening on port %d", self._config.port)

    async def stop(self) -> None:
        """Stop accepting requests. Safe to call more than once."""
        if self._runner is None:
            return
        runner, self._runner = self._runner, None
        await runner.cleanup()
        _logger.info("Health server closed")
