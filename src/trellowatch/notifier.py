"""Notifier: delivers one message per change to the messaging API."""

from __future__ import annotations

import logging

from trellowatch._api import messaging as _messaging_api
from trellowatch._redact import redact_for_log
from trellowatch._transport import Transport
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import NotificationError

_logger = logging.getLogger(__name__)


class Notifier:
    """Sends plain-text messages to the configured phone number."""

    def __init__(self, config: MonitorConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def send(self, message: str) -> bool:
        """Send *message* and report whether the API accepted it.

        Failures are logged and never raised so one bad message cannot
        block the rest of a batch.
        """
        try:
            result = await _messaging_api.send_message(self._transport, self._config, message)
        except NotificationError as exc:
            _logger.error("Notification failed: %s", exc)
            return False
        _logger.info("Notification sent: %s", redact_for_log(result, max_string=200))
        return True
