from __future__ import annotations

import logging

import pytest

from pydwelo.lock.translate import to_battery_status, to_lock_state
from pydwelo.models.lock import BatteryStatus, LockState
from pydwelo.models.sensor import SensorReading


def _reading(kind: str, value: str) -> SensorReading:
    return SensorReading(kind=kind, value=value)


class TestToLockState:
    @pytest.mark.parametrize(
        "readings",
        [
            [],
            [_reading("battery", "90")],
            [_reading("door", "closed"), _reading("battery", "10")],
        ],
    )
    def test_missing_lock_reading_is_unknown(self, readings: list[SensorReading]) -> None:
        assert to_lock_state(readings) == LockState.UNKNOWN

    def test_locked_is_secured(self) -> None:
        assert to_lock_state([_reading("battery", "90"), _reading("lock", "locked")]) == LockState.SECURED

    @pytest.mark.parametrize("value", ["unlocked", "jammed", "", "LOCKED"])
    def test_any_other_value_is_unsecured(self, value: str) -> None:
        assert to_lock_state([_reading("lock", value)]) == LockState.UNSECURED

    def test_first_lock_reading_wins(self) -> None:
        readings = [_reading("lock", "unlocked"), _reading("lock", "locked")]
        assert to_lock_state(readings) == LockState.UNSECURED


class TestToBatteryStatus:
    def test_missing_battery_reading(self) -> None:
        assert to_battery_status([_reading("lock", "locked")]) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("100", BatteryStatus(percent=100, low=False)),
            ("21", BatteryStatus(percent=21, low=False)),
            ("20", BatteryStatus(percent=20, low=True)),
            ("3", BatteryStatus(percent=3, low=True)),
            ("55.7", BatteryStatus(percent=55, low=False)),
            (" 40% ", BatteryStatus(percent=40, low=False)),
        ],
    )
    def test_percent_and_low_flag(self, value: str, expected: BatteryStatus) -> None:
        assert to_battery_status([_reading("battery", value)]) == expected

    @pytest.mark.parametrize("value", ["", "n/a", "nan", "inf", "1e3", "-5", "101"])
    def test_malformed_value_is_logged_and_skipped(self, value: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pydwelo.lock.translate"):
            assert to_battery_status([_reading("battery", value)]) is None
        assert "malformed battery reading" in caplog.text
