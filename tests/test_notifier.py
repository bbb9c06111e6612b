from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from trellowatch._transport import HttpTransport
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import TransportError
from trellowatch.notifier import Notifier


class _RecordingTransport:
    def __init__(self, error: Exception | None = None) -> None:
        self._error = error
        self.posts: list[tuple[str, dict[str, Any], dict[str, str]]] = []

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        raise AssertionError("notifier must not GET")

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        self.posts.append((url, dict(payload), dict(headers or {})))
        if self._error is not None:
            raise self._error
        return {"id": 42, "status": "queued"}


def _config() -> MonitorConfig:
    return MonitorConfig(
        trello_api_key="key",
        trello_api_token="token",
        board_id="board",
        messaging_api_key="msg-key",
        phone_number="5511999990000",
        messaging_base_url="https://messages.example.com/",
    )


@pytest.mark.asyncio
async def test_send_posts_message_to_phone_number() -> None:
    transport = _RecordingTransport()

    assert await Notifier(_config(), transport).send("hello") is True

    url, body, headers = transport.posts[0]
    assert url == "https://messages.example.com/api/send/5511999990000"
    assert body == {"body": "hello", "connectionFrom": 5, "ticketStrategy": "create"}
    assert headers == {"Authorization": "Bearer msg-key"}


@pytest.mark.asyncio
async def test_send_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    transport = _RecordingTransport(TransportError("HTTP 500 from x", status_code=500))

    assert await Notifier(_config(), transport).send("hello") is False
    assert "Notification failed" in caplog.text


@pytest.mark.asyncio
async def test_undecodable_success_reply_counts_as_failed_send() -> None:
    async def send(_request: web.Request) -> web.Response:
        return web.Response(body=b"\xff\xfe{", content_type="application/json", charset="utf-8")

    app = web.Application()
    app.router.add_post("/api/send/123", send)

    async with TestServer(app) as server, aiohttp.ClientSession() as http:
        config = MonitorConfig(
            trello_api_key="key",
            trello_api_token="token",
            board_id="board",
            messaging_api_key="msg-key",
            phone_number="123",
            messaging_base_url=str(server.make_url("/")),
        )
        assert await Notifier(config, HttpTransport(http)).send("hi") is False
