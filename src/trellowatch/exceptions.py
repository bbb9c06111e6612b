"""Custom exception hierarchy for trellowatch."""

from __future__ import annotations


class MonitorError(Exception):
    """Base exception for all trellowatch errors."""


class MonitorConfigError(MonitorError):
    """Invalid or missing configuration."""


class TransportError(MonitorError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class BoardFetchError(MonitorError):
    """The board API could not deliver cards or lists.

    Wraps transport failures as well as payloads that do not look like
    a list of cards/lists.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class NotificationError(MonitorError):
    """The messaging API rejected or failed to deliver a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
