"""trellowatch - Trello board watcher that reports card moves over a messaging API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("trellowatch")
except PackageNotFoundError:
    __version__ = "0+local"
from trellowatch.board import BoardFetcher, resolve_list_names
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import (
    BoardFetchError,
    MonitorConfigError,
    MonitorError,
    NotificationError,
    TransportError,
)
from trellowatch.models import BoardList, Card, CardRecord, ChangeEvent, ChangeKind
from trellowatch.monitor import BoardMonitor, CycleOutcome, CycleReport
from trellowatch.notifier import Notifier
from trellowatch.state.detector import detect_changes
from trellowatch.state.store import LoadStatus, SnapshotLoad, SnapshotStore

__all__ = [
    "__version__",
    "BoardFetchError",
    "BoardFetcher",
    "BoardList",
    "BoardMonitor",
    "Card",
    "CardRecord",
    "ChangeEvent",
    "ChangeKind",
    "CycleOutcome",
    "CycleReport",
    "LoadStatus",
    "MonitorConfig",
    "MonitorConfigError",
    "MonitorError",
    "Notifier",
    "NotificationError",
    "SnapshotLoad",
    "SnapshotStore",
    "TransportError",
    "detect_changes",
    "resolve_list_names",
]
