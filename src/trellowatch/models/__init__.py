"""Data models."""

from trellowatch.models.board import BoardList, Card
from trellowatch.models.changes import ChangeEvent, ChangeKind
from trellowatch.models.snapshot import CardRecord, Snapshot, build_snapshot

__all__ = [
    "BoardList",
    "Card",
    "CardRecord",
    "ChangeEvent",
    "ChangeKind",
    "Snapshot",
    "build_snapshot",
]
