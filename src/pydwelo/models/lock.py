"""Lock state enums and battery status.

Integer values follow the HomeKit ``LockCurrentState`` and
``LockTargetState`` characteristics so they can be handed to a
HomeKit bridge unchanged.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict


class LockState(enum.IntEnum):
    """Observed lock state."""

    UNSECURED = 0
    SECURED = 1
    JAMMED = 2  # never derived from Dwelo readings; keeps the HomeKit numbering
    UNKNOWN = 3


class TargetState(enum.IntEnum):
    """State a lock has been asked to reach."""

    UNSECURED = 0
    SECURED = 1

    @classmethod
    def from_lock_state(cls, state: LockState) -> TargetState:
        """Map an observed state to the target that would produce it.

        Anything other than ``SECURED`` maps to ``UNSECURED``.
        """
        return cls.SECURED if state == LockState.SECURED else cls.UNSECURED

    def expected_lock_state(self) -> LockState:
        """Observed state that confirms this target was reached."""
        return LockState.SECURED if self == TargetState.SECURED else LockState.UNSECURED


class BatteryStatus(BaseModel):
    """Battery level derived from a ``battery`` sensor reading."""

    model_config = ConfigDict(frozen=True)

    percent: int
    low: bool
