"""Change events produced by comparing two board snapshots."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ChangeKind(StrEnum):
    MOVED = "moved"
    CREATED = "created"
    REMOVED = "removed"


class ChangeEvent(BaseModel):
    """A single difference between the previous snapshot and the current fetch.

    ``from_list`` is ``None`` for created cards and ``to_list`` is ``None``
    for removed cards.
    """

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    card_id: str
    card_name: str
    from_list: str | None = None
    to_list: str | None = None

    @classmethod
    def moved(cls, card_id: str, card_name: str, from_list: str, to_list: str) -> ChangeEvent:
        return cls(kind=ChangeKind.MOVED, card_id=card_id, card_name=card_name, from_list=from_list, to_list=to_list)

    @classmethod
    def created(cls, card_id: str, card_name: str, to_list: str) -> ChangeEvent:
        return cls(kind=ChangeKind.CREATED, card_id=card_id, card_name=card_name, to_list=to_list)

    @classmethod
    def removed(cls, card_id: str, card_name: str, from_list: str) -> ChangeEvent:
        return cls(kind=ChangeKind.REMOVED, card_id=card_id, card_name=card_name, from_list=from_list)

    @property
    def message(self) -> str:
        """Human-readable notification text."""
        if self.kind == ChangeKind.MOVED:
            return f'🔄 Card "{self.card_name}" moved from "{self.from_list}" to "{self.to_list}"'
        if self.kind == ChangeKind.CREATED:
            return f'🆕 New card "{self.card_name}" created in list "{self.to_list}"'
        return f'🗑️ Card "{self.card_name}" was removed from list "{self.from_list}"'
