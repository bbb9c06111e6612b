"""Messaging endpoint: ``POST /api/send/{number}``."""

from __future__ import annotations

from typing import Any

from trellowatch._transport import Transport
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import NotificationError, TransportError


def send_url(config: MonitorConfig) -> str:
    return f"{config.messaging_base_url.rstrip('/')}/api/send/{config.phone_number}"


def build_send_request(config: MonitorConfig, message: str) -> tuple[dict[str, Any], dict[str, str]]:
    """Return the ``(body, headers)`` pair for sending *message*."""
    body: dict[str, Any] = {
        "body": message,
        "connectionFrom": config.connection_from,
        "ticketStrategy": config.ticket_strategy,
    }
    headers = {"Authorization": f"Bearer {config.messaging_api_key}"}
    return body, headers


async def send_message(transport: Transport, config: MonitorConfig, message: str) -> Any:
    """Send *message* and return the decoded response body."""
    body, headers = build_send_request(config, message)
    try:
        return await transport.post_json(send_url(config), body, headers=headers)
    except TransportError as exc:
        raise NotificationError(f"Could not send message: {exc}", status_code=exc.status_code) from exc
