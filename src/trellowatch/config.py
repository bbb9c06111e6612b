"""Process configuration for trellowatch."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from trellowatch._constants import (
    CONNECTION_FROM,
    HTTP_TIMEOUT_S,
    MARKER_FILENAME,
    MESSAGING_BASE_URL,
    NOTIFY_DELAY_S,
    POLL_INTERVAL_S,
    SERVICE_NAME,
    SHUTDOWN_GRACE_S,
    SNAPSHOT_FILENAME,
    TICKET_STRATEGY,
    TRELLO_BASE_URL,
)
from trellowatch.exceptions import MonitorConfigError

# Mandatory settings, in the order they are reported when missing.
_REQUIRED_ENV: dict[str, str] = {
    "TRELLO_API_KEY": "trello_api_key",
    "TRELLO_API_TOKEN": "trello_api_token",
    "BOARD_ID": "board_id",
    "API_KEY": "messaging_api_key",
    "PHONE_NUMBER": "phone_number",
}

_ENV_CONFIG_MAP: dict[str, str] = {
    **_REQUIRED_ENV,
    "API_URL": "messaging_base_url",
    "TRELLO_API_URL": "trello_base_url",
    "SERVICE_NAME": "service_name",
    "MESSAGING_TICKET_STRATEGY": "ticket_strategy",
}

_ENV_FLOAT_MAP: dict[str, str] = {
    "POLL_INTERVAL_SECONDS": "poll_interval",
    "NOTIFY_DELAY_SECONDS": "notify_delay",
    "HTTP_TIMEOUT_SECONDS": "http_timeout",
}

_ENV_INT_MAP: dict[str, str] = {
    "PORT": "port",
    "MESSAGING_CONNECTION_FROM": "connection_from",
}


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Mapping[str, str], key: str, kind: type[int] | type[float]) -> int | float | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise MonitorConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Monitor configuration.

    Parameters
    ----------
    trello_api_key : str
        Trello API key, passed through as an opaque query parameter.
    trello_api_token : str
        Trello API token, passed through as an opaque query parameter.
    board_id : str
        Identifier of the board to watch.
    messaging_api_key : str
        Bearer token for the messaging API.
    phone_number : str
        Destination number notifications are sent to.
    messaging_base_url : str
        Messaging API base URL.
    trello_base_url : str
        Trello REST API base URL.
    port : int
        Listen port of the liveness endpoint.
    environment : str
        Free-form deployment environment name (``"development"``,
        ``"production"``...). Only logged.
    service_name : str
        Name reported by the liveness endpoint.
    state_dir : Path
        Directory holding the snapshot file and the initialization marker.
    poll_interval : float
        Seconds between the end of one poll cycle and the start of the next.
        Also used as the retry delay after a failed fetch.
    notify_delay : float
        Seconds to wait between two notifications of the same cycle.
    http_timeout : float
        Total timeout for a single HTTP request.
    shutdown_grace : float
        Seconds an in-flight cycle may keep running after a stop signal.
    reseed_on_corrupt_snapshot : bool
        When the initialization marker is set but the snapshot is missing
        or unreadable, re-seed silently instead of reporting every card
        as created.
    connection_from : int
        ``connectionFrom`` value sent with every message.
    ticket_strategy : str
        ``ticketStrategy`` value sent with every message.
    """

    trello_api_key: str = dataclasses.field(default="", repr=False)
    trello_api_token: str = dataclasses.field(default="", repr=False)
    board_id: str = ""
    messaging_api_key: str = dataclasses.field(default="", repr=False)
    phone_number: str = ""
    messaging_base_url: str = MESSAGING_BASE_URL
    trello_base_url: str = TRELLO_BASE_URL
    port: int = 3000
    environment: str = "development"
    service_name: str = SERVICE_NAME
    state_dir: Path = Path(".")
    poll_interval: float = POLL_INTERVAL_S
    notify_delay: float = NOTIFY_DELAY_S
    http_timeout: float = HTTP_TIMEOUT_S
    shutdown_grace: float = SHUTDOWN_GRACE_S
    reseed_on_corrupt_snapshot: bool = False
    connection_from: int = CONNECTION_FROM
    ticket_strategy: str = TICKET_STRATEGY

    @property
    def snapshot_path(self) -> Path:
        return Path(self.state_dir) / SNAPSHOT_FILENAME

    @property
    def marker_path(self) -> Path:
        return Path(self.state_dir) / MARKER_FILENAME

    def missing_fields(self) -> list[str]:
        """Return the env var names of mandatory settings that are empty."""
        return [env_key for env_key, field_name in _REQUIRED_ENV.items() if not getattr(self, field_name)]

    def validate(self) -> MonitorConfig:
        """Check mandatory settings and value ranges.

        Returns ``self`` so calls can be chained after construction.

        Raises
        ------
        MonitorConfigError
            If a mandatory setting is missing or a value is out of range.
        """
        missing = self.missing_fields()
        if missing:
            raise MonitorConfigError(f"Missing required environment variables: {', '.join(missing)}")
        if self.poll_interval <= 0:
            raise MonitorConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.notify_delay < 0:
            raise MonitorConfigError(f"notify_delay must not be negative, got {self.notify_delay}")
        if not 0 <= self.port <= 65535:
            raise MonitorConfigError(f"port must be between 0 and 65535, got {self.port}")
        return self

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides: Any) -> MonitorConfig:
        """Create configuration from environment variables.

        Explicit keyword arguments override environment values. The result
        is validated before it is returned.

        Parameters
        ----------
        env : Mapping[str, str] or None
            Variables to read instead of ``os.environ``.
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MonitorConfig
            Populated, validated configuration.

        Raises
        ------
        MonitorConfigError
            If a mandatory variable is missing or a value is malformed.
        """
        if env is None:
            env = os.environ

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            number = _env_number(env, env_key, float)
            if number is not None:
                config_kwargs[field_name] = number

        for env_key, field_name in _ENV_INT_MAP.items():
            number = _env_number(env, env_key, int)
            if number is not None:
                config_kwargs[field_name] = number

        environment = env.get("ENVIRONMENT") or env.get("NODE_ENV")
        if environment:
            config_kwargs["environment"] = environment

        state_dir = env.get("STATE_DIR")
        if state_dir:
            config_kwargs["state_dir"] = Path(state_dir)

        config_kwargs["reseed_on_corrupt_snapshot"] = _env_bool(env.get("RESEED_ON_CORRUPT_SNAPSHOT"), False)

        config_kwargs.update(overrides)
        if "state_dir" in config_kwargs:
            config_kwargs["state_dir"] = Path(config_kwargs["state_dir"])

        return cls(**config_kwargs).validate()
