"""Poll loop: fetch, detect, notify, persist, wait, repeat."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from trellowatch.board import resolve_list_names
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import BoardFetchError
from trellowatch.models.board import BoardList, Card
from trellowatch.models.changes import ChangeEvent
from trellowatch.state.detector import detect_changes
from trellowatch.state.store import LoadStatus, SnapshotStore

_logger = logging.getLogger(__name__)


class CardSource(Protocol):
    async def fetch_cards(self) -> list[Card]:
        ...

    async def fetch_lists(self) -> list[BoardList]:
        ...


class MessageSink(Protocol):
    async def send(self, message: str) -> bool:
        ...


class CycleOutcome(StrEnum):
    BOOTSTRAPPED = "bootstrapped"
    """State seeded without notifying (first run or re-seed)."""
    COMPLETED = "completed"
    """Changes detected, delivered and persisted."""
    FETCH_FAILED = "fetch_failed"
    """The board API failed; nothing was touched."""
    EMPTY_BOARD = "empty_board"
    """The board API returned zero cards; nothing was touched."""


@dataclass
class CycleReport:
    """What a single poll cycle did."""

    outcome: CycleOutcome
    cards: list[Card] = field(default_factory=list)
    changes: list[ChangeEvent] = field(default_factory=list)
    sent: int = 0
    failed: int = 0
    snapshot_saved: bool = False

    @property
    def aborted(self) -> bool:
        return self.outcome in (CycleOutcome.FETCH_FAILED, CycleOutcome.EMPTY_BOARD)


async def _wait_for_stop(stop: asyncio.Event, timeout: float) -> bool:
    """Sleep up to *timeout* seconds; return ``True`` if *stop* was set."""
    try:
        await asyncio.wait_for(stop.wait(), timeout)
    except TimeoutError:
        return False
    return True


class BoardMonitor:
    """Watches one board and reports list membership changes.

    Exactly one cycle runs at a time. The next cycle starts
    ``config.poll_interval`` seconds after the previous one *finished*, so
    a slow notification batch pushes the schedule back.

    Usage::

        monitor = BoardMonitor(config, store, fetcher, notifier)
        await monitor.run(stop_event)
    """

    def __init__(
        self,
        config: MonitorConfig,
        store: SnapshotStore,
        fetcher: CardSource,
        notifier: MessageSink,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._store = store
        self._fetcher = fetcher
        self._notifier = notifier
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run(self, stop: asyncio.Event) -> None:
        """Run cycles until *stop* is set.

        *stop* is checked between cycles; a cycle already in progress is
        not interrupted.
        """
        _logger.info(
            "Watching board %s every %.0f seconds (environment: %s)",
            self._config.board_id,
            self._config.poll_interval,
            self._config.environment,
        )
        while not stop.is_set():
            try:
                report = await self.run_cycle()
            except Exception:
                _logger.exception("Poll cycle crashed")
            else:
                if report.aborted:
                    _logger.warning("Cycle aborted (%s), retrying", report.outcome)

            _logger.info("Next check in %.0f seconds", self._config.poll_interval)
            if await _wait_for_stop(stop, self._config.poll_interval):
                break
        _logger.info("Monitor stopped")

    # ------------------------------------------------------------------
    # Single cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> CycleReport:
        """Fetch the board once and act on it.

        On the first run the fetched state is persisted without notifying.
        Afterwards every change is delivered, one message at a time, and
        the new state is persisted. If the fetch fails or returns no cards
        the stored state is left untouched.
        """
        first_run = self._store.is_first_run()
        loaded = self._store.load()
        _logger.info("Previous snapshot loaded: %d cards", len(loaded.snapshot))

        try:
            cards = await self._fetcher.fetch_cards()
        except BoardFetchError as exc:
            _logger.error("Could not fetch cards: %s", exc)
            return CycleReport(CycleOutcome.FETCH_FAILED)
        if not cards:
            _logger.warning("Board returned no cards; keeping the previous snapshot")
            return CycleReport(CycleOutcome.EMPTY_BOARD)

        cards = resolve_list_names(cards, await self._fetch_lists())

        bootstrap = first_run
        if not first_run and loaded.status != LoadStatus.LOADED:
            _logger.error(
                "Initialization marker is set but the snapshot is %s%s",
                loaded.status,
                "; re-seeding without notifications" if self._config.reseed_on_corrupt_snapshot else "",
            )
            bootstrap = self._config.reseed_on_corrupt_snapshot

        if bootstrap:
            return self._bootstrap(cards)

        changes = detect_changes(loaded.snapshot, cards)
        sent, failed = await self._deliver(changes)
        saved = self._store.save(cards)
        self._log_summary(cards)
        return CycleReport(
            CycleOutcome.COMPLETED,
            cards=cards,
            changes=changes,
            sent=sent,
            failed=failed,
            snapshot_saved=saved,
        )

    def _bootstrap(self, cards: list[Card]) -> CycleReport:
        _logger.info("First run: recording %d cards without sending notifications", len(cards))
        saved = self._store.save(cards)
        if saved:
            self._store.mark_initialized()
        self._log_summary(cards)
        return CycleReport(CycleOutcome.BOOTSTRAPPED, cards=cards, snapshot_saved=saved)

    async def _fetch_lists(self) -> list[BoardList]:
        try:
            return await self._fetcher.fetch_lists()
        except BoardFetchError as exc:
            _logger.warning("Could not fetch lists, falling back to embedded names: %s", exc)
            return []

    async def _deliver(self, changes: Sequence[ChangeEvent]) -> tuple[int, int]:
        if not changes:
            _logger.info("No changes detected")
            return 0, 0

        _logger.info("Sending %d notification(s)...", len(changes))
        sent = failed = 0
        for index, change in enumerate(changes):
            if index:
                await self._sleep(self._config.notify_delay)
            _logger.info("Change detected: %s", change.message)
            if await self._notifier.send(change.message):
                sent += 1
            else:
                failed += 1
        _logger.info("Notifications done: %d sent, %d failed", sent, failed)
        return sent, failed

    @staticmethod
    def _log_summary(cards: Sequence[Card]) -> None:
        _logger.info("Current cards:")
        for position, card in enumerate(cards, start=1):
            _logger.info("%d. %s - List: %s", position, card.name, card.list_name)
