"""Data models for Dwelo API responses and lock state."""

from pydwelo.models._base import DweloBaseModel
from pydwelo.models.device import Device, DeviceType
from pydwelo.models.lock import BatteryStatus, LockState, TargetState
from pydwelo.models.sensor import SensorReading

__all__ = [
    "BatteryStatus",
    "Device",
    "DeviceType",
    "DweloBaseModel",
    "LockState",
    "SensorReading",
    "TargetState",
]
