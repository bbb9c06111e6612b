"""Board fetcher: current cards and lists of the watched board."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from trellowatch._api import board as _board_api
from trellowatch._constants import UNKNOWN_LIST_NAME
from trellowatch._transport import Transport
from trellowatch.config import MonitorConfig
from trellowatch.models.board import BoardList, Card

_logger = logging.getLogger(__name__)


def resolve_list_names(cards: Sequence[Card], lists: Iterable[BoardList]) -> list[Card]:
    """Return copies of *cards* with ``list_name`` filled in.

    The name comes from *lists* when the card's ``id_list`` is known there,
    otherwise from the list object embedded in the card, otherwise it is
    ``"Unknown"``.
    """
    names = {board_list.id: board_list.name for board_list in lists}
    resolved: list[Card] = []
    for card in cards:
        name = names.get(card.id_list)
        if name is None and card.embedded_list is not None and card.embedded_list.id == card.id_list:
            name = card.embedded_list.name
        resolved.append(card.model_copy(update={"list_name": name or UNKNOWN_LIST_NAME}))
    return resolved


class BoardFetcher:
    """Reads the board through the board API.

    Both methods raise :class:`~trellowatch.exceptions.BoardFetchError` on
    any transport or payload failure; an empty list means the board really
    is empty.
    """

    def __init__(self, config: MonitorConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def fetch_cards(self) -> list[Card]:
        cards = await _board_api.fetch_cards(self._transport, self._config)
        _logger.info("%d cards found on board %s", len(cards), self._config.board_id)
        return cards

    async def fetch_lists(self) -> list[BoardList]:
        lists = await _board_api.fetch_lists(self._transport, self._config)
        _logger.debug("%d lists found on board %s", len(lists), self._config.board_id)
        return lists
