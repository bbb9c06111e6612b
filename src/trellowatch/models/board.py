"""Board models: cards and the lists they live in."""

from __future__ import annotations

from pydantic import Field

from trellowatch.models._base import TrelloBaseModel


class BoardList(TrelloBaseModel):
    """A column on the board."""

    id: str
    """Opaque list identifier."""
    name: str = ""
    """Display name."""


class Card(TrelloBaseModel):
    """A card as returned by ``/boards/{id}/cards``.

    Only the fields needed to track list membership are kept. ``list_name``
    is not part of the API payload; it is filled in by
    :func:`trellowatch.board.resolve_list_names`.
    """

    id: str
    """Opaque card identifier, stable across polls."""
    name: str = ""
    """Card title."""
    id_list: str = ""
    """Identifier of the list the card currently belongs to."""
    embedded_list: BoardList | None = Field(default=None, alias="list")
    """List object embedded by the API when requested with ``list=true``."""
    list_name: str | None = None
    """Resolved list display name."""
