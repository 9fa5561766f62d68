"""Attributes a lock exposes to a home-automation controller.

The reconciliation engine pushes every change through the
:class:`LockExposition` protocol.  :class:`LockAttributes` is the
in-memory implementation: it keeps the latest values and notifies
listeners, which is where a bridge (HomeKit, MQTT, ...) hooks in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from pydwelo.models.lock import BatteryStatus, LockState, TargetState

_logger = logging.getLogger(__name__)

AttributeListener = Callable[[str, Any], None]

CURRENT_STATE = "current_state"
TARGET_STATE = "target_state"
BATTERY_LEVEL = "battery_level"
LOW_BATTERY = "low_battery"


class LockExposition(Protocol):
    """Sink for the attributes of one lock."""

    def update_current_state(self, state: LockState) -> None:
        ...

    def update_target_state(self, target: TargetState) -> None:
        ...

    def update_battery(self, battery: BatteryStatus) -> None:
        ...


class LockAttributes:
    """Latest exposed values of one lock, with change listeners.

    Listeners are called as ``listener(attribute_name, value)`` on every
    update, including updates that repeat the current value.
    """

    def __init__(self) -> None:
        self.current_state: LockState = LockState.UNKNOWN
        self.target_state: TargetState | None = None
        self.battery_level: int | None = None
        self.low_battery: bool | None = None
        self._listeners: list[AttributeListener] = []

    def add_listener(self, listener: AttributeListener) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self, name: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(name, value)
            except Exception:
                _logger.debug("Attribute listener failed for %s", name, exc_info=True)

    def update_current_state(self, state: LockState) -> None:
        self.current_state = state
        self._notify(CURRENT_STATE, state)

    def update_target_state(self, target: TargetState) -> None:
        self.target_state = target
        self._notify(TARGET_STATE, target)

    def update_battery(self, battery: BatteryStatus) -> None:
        self.battery_level = battery.percent
        self.low_battery = battery.low
        self._notify(BATTERY_LEVEL, battery.percent)
        self._notify(LOW_BATTERY, battery.low)

    def snapshot(self) -> dict[str, Any]:
        """Current attribute values keyed by attribute name."""
        return {
            CURRENT_STATE: self.current_state,
            TARGET_STATE: self.target_state,
            BATTERY_LEVEL: self.battery_level,
            LOW_BATTERY: self.low_battery,
        }
