"""Client and lock configuration for pydwelo."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pydwelo._constants import BASE_URL
from pydwelo.exceptions import DweloConfigError


@dataclasses.dataclass(frozen=True)
class DweloConfig:
    """Client configuration.

    Parameters
    ----------
    token : str
        Dwelo API token, sent as ``Authorization: Token <token>``.
    gateway_id : str
        Identifier of the gateway (community unit) whose devices are managed.
    base_url : str
        API base URL.
    lock_poll_ms : int
        Interval between lock status polls, in milliseconds.  The command
        watchdog gives a lock two poll intervals to confirm a command.
    auto_lock_minutes : float
        Minutes a lock may stay unlocked before it is relocked
        automatically.  ``0`` disables auto-lock.
    request_timeout : float
        Total timeout, in seconds, for a single HTTP request.
    """

    token: str
    gateway_id: str
    base_url: str = BASE_URL
    lock_poll_ms: int = 5000
    auto_lock_minutes: float = 0
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.token or not self.token.strip():
            raise DweloConfigError("token must be non-empty")
        if not str(self.gateway_id).strip():
            raise DweloConfigError("gateway_id must be non-empty")
        if self.lock_poll_ms <= 0:
            raise DweloConfigError(f"lock_poll_ms must be positive, got {self.lock_poll_ms}")
        if self.auto_lock_minutes < 0:
            raise DweloConfigError(f"auto_lock_minutes must not be negative, got {self.auto_lock_minutes}")

    @property
    def lock_poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.lock_poll_ms / 1000.0

    @classmethod
    def from_env(cls, **overrides: Any) -> DweloConfig:
        """Create configuration from environment variables.

        Reads ``DWELO_TOKEN``, ``DWELO_GATEWAY_ID`` and the optional
        ``DWELO_*`` tuning variables. Explicit keyword arguments override
        environment values.

        Raises
        ------
        DweloConfigError
            When a numeric variable cannot be parsed or the resulting
            configuration is invalid.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "DWELO_TOKEN": "token",
            "DWELO_GATEWAY_ID": "gateway_id",
            "DWELO_BASE_URL": "base_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP = {
            "DWELO_LOCK_POLL_MS": ("lock_poll_ms", int),
            "DWELO_AUTO_LOCK_MINUTES": ("auto_lock_minutes", float),
            "DWELO_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, parse) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = parse(val)
            except ValueError as exc:
                raise DweloConfigError(f"{env_key} is not a valid number: {val!r}") from exc

        config_kwargs.update(overrides)

        missing = [name for name in ("token", "gateway_id") if name not in config_kwargs]
        if missing:
            raise DweloConfigError(f"Missing required configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
