"""Persisted snapshot records."""

from __future__ import annotations

from trellowatch._constants import UNKNOWN_LIST_NAME
from trellowatch.models._base import TrelloBaseModel
from trellowatch.models.board import Card


class CardRecord(TrelloBaseModel):
    """Last-known list membership of one card.

    Serialized by alias, so the snapshot file reads
    ``{"id", "name", "idList", "listName"}``.
    """

    id: str
    name: str = ""
    id_list: str = ""
    list_name: str = UNKNOWN_LIST_NAME

    @classmethod
    def from_card(cls, card: Card) -> CardRecord:
        return cls(
            id=card.id,
            name=card.name,
            id_list=card.id_list,
            list_name=card.list_name or UNKNOWN_LIST_NAME,
        )


Snapshot = dict[str, CardRecord]
"""Card id -> record, in fetch order."""


def build_snapshot(cards: list[Card]) -> Snapshot:
    """Key *cards* by id. Later duplicates replace earlier ones."""
    return {card.id: CardRecord.from_card(card) for card in cards}
