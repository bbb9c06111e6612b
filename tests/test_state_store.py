from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from trellowatch.models.board import Card
from trellowatch.models.snapshot import CardRecord
from trellowatch.state.store import LoadStatus, SnapshotStore


def _store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(
        tmp_path / "trello-state.json",
        tmp_path / "trello-state.initialized",
        clock=lambda: datetime(2026, 1, 1, tzinfo=UTC),
    )


def test_missing_snapshot_loads_empty(tmp_path: Path) -> None:
    loaded = _store(tmp_path).load()

    assert loaded.status == LoadStatus.MISSING
    assert loaded.snapshot == {}
    assert not loaded.ok


def test_save_then_load_round_trips_cards(tmp_path: Path) -> None:
    store = _store(tmp_path)
    cards = [
        Card(id="c1", name="Write docs", id_list="l1", list_name="To Do"),
        Card(id="c2", name="Ship", id_list="l2"),
    ]

    assert store.save(cards)
    loaded = store.load()

    assert loaded.ok
    assert list(loaded.snapshot) == ["c1", "c2"]
    assert loaded.snapshot["c1"] == CardRecord(id="c1", name="Write docs", id_list="l1", list_name="To Do")
    assert loaded.snapshot["c2"].list_name == "Unknown"


def test_snapshot_file_uses_camel_case_and_is_pretty_printed(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save([Card(id="c1", name="Café", id_list="l1", list_name="Feito")])

    text = store.snapshot_path.read_text(encoding="utf-8")

    assert json.loads(text) == {"c1": {"id": "c1", "name": "Café", "idList": "l1", "listName": "Feito"}}
    assert "\n  " in text
    assert not store.snapshot_path.with_name("trello-state.json.tmp").exists()


def test_save_overwrites_previous_snapshot(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save([Card(id="c1", name="a", id_list="l1"), Card(id="c2", name="b", id_list="l1")])
    store.save([Card(id="c2", name="b", id_list="l2", list_name="Done")])

    snapshot = store.load().snapshot

    assert list(snapshot) == ["c2"]
    assert snapshot["c2"].id_list == "l2"


def test_corrupt_snapshot_loads_empty_with_status(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.snapshot_path.write_text("{not json", encoding="utf-8")

    loaded = store.load()

    assert loaded.status == LoadStatus.CORRUPT
    assert loaded.snapshot == {}
    assert loaded.error


def test_wrong_shape_snapshot_is_corrupt(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.snapshot_path.write_text("[1, 2, 3]", encoding="utf-8")

    assert store.load().status == LoadStatus.CORRUPT


def test_save_failure_returns_false(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = SnapshotStore(blocker / "trello-state.json", tmp_path / "marker")

    assert store.save([Card(id="c1", name="a", id_list="l1")]) is False


def test_marker_lifecycle(tmp_path: Path) -> None:
    store = _store(tmp_path)
    assert store.is_first_run()

    assert store.mark_initialized()
    assert not store.is_first_run()
    assert store.marker_path.read_text(encoding="utf-8") == "2026-01-01T00:00:00+00:00"

    # Idempotent: the first timestamp is kept.
    store._clock = lambda: datetime(2027, 1, 1, tzinfo=UTC)  # noqa: SLF001
    assert store.mark_initialized()
    assert store.marker_path.read_text(encoding="utf-8").startswith("2026")


def test_reset_removes_snapshot_and_marker(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save([Card(id="c1", name="a", id_list="l1")])
    store.mark_initialized()

    store.reset()

    assert store.is_first_run()
    assert store.load().status == LoadStatus.MISSING
    store.reset()


def test_reset_failure_is_logged_not_raised(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    store = _store(tmp_path)
    store.save([Card(id="c1", name="a", id_list="l1")])
    store.marker_path.mkdir(parents=True)

    assert store.reset() is False
    assert store.load().status == LoadStatus.MISSING
    assert "Could not remove" in caplog.text
