from __future__ import annotations

import pytest

from pydwelo.config import DweloConfig
from pydwelo.exceptions import DweloConfigError


def test_defaults() -> None:
    config = DweloConfig(token="tok", gateway_id="777")
    assert config.base_url == "https://api.dwelo.com"
    assert config.lock_poll_ms == 5000
    assert config.lock_poll_interval == 5.0
    assert config.auto_lock_minutes == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"token": "", "gateway_id": "777"},
        {"token": "tok", "gateway_id": " "},
        {"token": "tok", "gateway_id": "777", "lock_poll_ms": 0},
        {"token": "tok", "gateway_id": "777", "auto_lock_minutes": -1},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(DweloConfigError):
        DweloConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DWELO_TOKEN", "env-token")
    monkeypatch.setenv("DWELO_GATEWAY_ID", "555")
    monkeypatch.setenv("DWELO_LOCK_POLL_MS", "2500")
    monkeypatch.setenv("DWELO_AUTO_LOCK_MINUTES", "1.5")

    config = DweloConfig.from_env()

    assert config.token == "env-token"
    assert config.gateway_id == "555"
    assert config.lock_poll_ms == 2500
    assert config.auto_lock_minutes == 1.5


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DWELO_TOKEN", "env-token")
    monkeypatch.setenv("DWELO_GATEWAY_ID", "555")
    monkeypatch.setenv("DWELO_LOCK_POLL_MS", "not-a-number")

    config = DweloConfig.from_env(gateway_id="999", lock_poll_ms=1000)

    assert config.gateway_id == "999"
    assert config.lock_poll_ms == 1000


def test_from_env_bad_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DWELO_TOKEN", "env-token")
    monkeypatch.setenv("DWELO_GATEWAY_ID", "555")
    monkeypatch.setenv("DWELO_AUTO_LOCK_MINUTES", "soon")

    with pytest.raises(DweloConfigError, match="DWELO_AUTO_LOCK_MINUTES"):
        DweloConfig.from_env()


def test_from_env_missing_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DWELO_TOKEN", raising=False)
    monkeypatch.setenv("DWELO_GATEWAY_ID", "555")

    with pytest.raises(DweloConfigError, match="token"):
        DweloConfig.from_env()
