"""Board endpoints: ``/boards/{id}/cards`` and ``/boards/{id}/lists``.

Both endpoints authenticate with ``key``/``token`` query parameters and
return a JSON array.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from trellowatch._transport import Transport
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import BoardFetchError, TransportError
from trellowatch.models.board import BoardList, Card

_CARDS = TypeAdapter(list[Card])
_LISTS = TypeAdapter(list[BoardList])


def _auth_params(config: MonitorConfig) -> dict[str, str]:
    return {"key": config.trello_api_key, "token": config.trello_api_token}


def board_url(config: MonitorConfig, resource: str) -> str:
    return f"{config.trello_base_url.rstrip('/')}/boards/{config.board_id}/{resource}"


async def _get_array(transport: Transport, config: MonitorConfig, resource: str, **extra: str) -> list[Any]:
    endpoint = f"/boards/{{id}}/{resource}"
    try:
        payload = await transport.get_json(board_url(config, resource), params={**_auth_params(config), **extra})
    except TransportError as exc:
        raise BoardFetchError(f"Could not fetch {resource}: {exc}", endpoint=endpoint) from exc
    if not isinstance(payload, list):
        raise BoardFetchError(f"Expected a JSON array from {endpoint}, got {type(payload).__name__}", endpoint=endpoint)
    return payload


async def fetch_cards(transport: Transport, config: MonitorConfig) -> list[Card]:
    """Fetch every open card on the board, with its list embedded."""
    payload = await _get_array(transport, config, "cards", list="true")
    try:
        return _CARDS.validate_python(payload)
    except ValidationError as exc:
        raise BoardFetchError(f"Malformed card payload: {exc}", endpoint="/boards/{id}/cards") from exc


async def fetch_lists(transport: Transport, config: MonitorConfig) -> list[BoardList]:
    """Fetch the lists of the board."""
    payload = await _get_array(transport, config, "lists")
    try:
        return _LISTS.validate_python(payload)
    except ValidationError as exc:
        raise BoardFetchError(f"Malformed list payload: {exc}", endpoint="/boards/{id}/lists") from exc
