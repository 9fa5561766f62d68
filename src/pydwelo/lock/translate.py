"""Pure mappings from raw sensor readings to lock and battery state.

Neither function keeps state: the observed lock state is always derived
from the most recent reading set alone.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from pydwelo._constants import LOCKED_VALUE, LOW_BATTERY_THRESHOLD, SENSOR_BATTERY, SENSOR_LOCK
from pydwelo.models.lock import BatteryStatus, LockState
from pydwelo.models.sensor import SensorReading

_logger = logging.getLogger(__name__)

# Whole percent, optionally with a fractional part (truncated) and a % sign.
_PERCENT_PATTERN = re.compile(r"\s*(\d+)(?:\.\d*)?\s*%?\s*")


def _find(readings: Iterable[SensorReading], kind: str) -> SensorReading | None:
    return next((reading for reading in readings if reading.kind == kind), None)


def _parse_percent(value: str) -> int | None:
    match = _PERCENT_PATTERN.fullmatch(value)
    if match is None:
        return None
    percent = int(match.group(1))
    if percent > 100:
        return None
    return percent


def to_lock_state(readings: Iterable[SensorReading]) -> LockState:
    """Translate a reading set into a :class:`LockState`.

    ``UNKNOWN`` when there is no ``lock`` reading, ``SECURED`` when it
    reads ``"locked"`` and ``UNSECURED`` for any other value.
    """
    reading = _find(readings, SENSOR_LOCK)
    if reading is None:
        return LockState.UNKNOWN
    return LockState.SECURED if reading.value == LOCKED_VALUE else LockState.UNSECURED


def to_battery_status(readings: Iterable[SensorReading]) -> BatteryStatus | None:
    """Translate a reading set into a :class:`BatteryStatus`.

    Returns ``None`` when there is no ``battery`` reading or its value is
    not numeric; callers leave the exposed battery state untouched then.
    """
    reading = _find(readings, SENSOR_BATTERY)
    if reading is None:
        return None
    percent = _parse_percent(reading.value)
    if percent is None:
        _logger.warning("Ignoring malformed battery reading %r", reading.value)
        return None
    return BatteryStatus(percent=percent, low=percent <= LOW_BATTERY_THRESHOLD)
