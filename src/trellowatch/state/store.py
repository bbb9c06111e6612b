"""On-disk snapshot store.

This is the only component that reads or writes the snapshot file and
the initialization marker. Every operation is best-effort: failures are
logged and reported through return values, never raised.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from trellowatch.models.board import Card
from trellowatch.models.snapshot import CardRecord, Snapshot, build_snapshot

_logger = logging.getLogger(__name__)

_SNAPSHOT = TypeAdapter(dict[str, CardRecord])


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LoadStatus(StrEnum):
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class SnapshotLoad:
    """Outcome of :meth:`SnapshotStore.load`.

    ``snapshot`` is empty unless ``status`` is ``LOADED``.
    """

    status: LoadStatus
    snapshot: Snapshot = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == LoadStatus.LOADED


class SnapshotStore:
    """Snapshot file plus initialization marker, both under one directory."""

    def __init__(
        self,
        snapshot_path: Path,
        marker_path: Path,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._snapshot_path = Path(snapshot_path)
        self._marker_path = Path(marker_path)
        self._clock = clock

    @property
    def snapshot_path(self) -> Path:
        return self._snapshot_path

    @property
    def marker_path(self) -> Path:
        return self._marker_path

    def load(self) -> SnapshotLoad:
        """Read the persisted snapshot.

        A missing or unreadable file yields an empty snapshot with the
        matching status so the caller can decide how loud to be about it.
        """
        try:
            text = self._snapshot_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return SnapshotLoad(LoadStatus.MISSING)
        except (OSError, UnicodeDecodeError) as exc:
            _logger.warning("Could not read snapshot %s: %s", self._snapshot_path, exc)
            return SnapshotLoad(LoadStatus.CORRUPT, error=str(exc))

        try:
            snapshot = _SNAPSHOT.validate_json(text)
        except ValidationError as exc:
            _logger.warning("Snapshot %s is corrupt: %s", self._snapshot_path, exc.errors()[0]["msg"])
            return SnapshotLoad(LoadStatus.CORRUPT, error=str(exc))
        return SnapshotLoad(LoadStatus.LOADED, snapshot)

    def save(self, cards: Sequence[Card]) -> bool:
        """Overwrite the snapshot with *cards*.

        The file is replaced atomically; on failure the previous snapshot is
        left in place.
        """
        snapshot = build_snapshot(list(cards))
        payload = {card_id: record.model_dump(by_alias=True) for card_id, record in snapshot.items()}
        tmp_path = self._snapshot_path.with_name(self._snapshot_path.name + ".tmp")
        try:
            self._snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._snapshot_path)
        except OSError as exc:
            _logger.error("Could not save snapshot %s: %s", self._snapshot_path, exc)
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            return False
        _logger.info("Snapshot saved (%d cards)", len(snapshot))
        return True

    def is_first_run(self) -> bool:
        return not self._marker_path.exists()

    def mark_initialized(self) -> bool:
        """Create the initialization marker. Idempotent."""
        if self._marker_path.exists():
            return True
        try:
            self._marker_path.parent.mkdir(parents=True, exist_ok=True)
            self._marker_path.write_text(self._clock().isoformat(), encoding="utf-8")
        except OSError as exc:
            _logger.error("Could not write initialization marker %s: %s", self._marker_path, exc)
            return False
        return True

    def reset(self) -> bool:
        """Forget everything; the next cycle starts from scratch.

        Returns ``False`` when a file could not be removed.
        """
        removed = True
        for path in (self._snapshot_path, self._marker_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                _logger.error("Could not remove %s: %s", path, exc)
                removed = False
        if removed:
            _logger.info("Snapshot and initialization marker removed")
        return removed
