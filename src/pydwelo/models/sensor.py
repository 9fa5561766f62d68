"""Sensor reading model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from pydwelo.models._base import DweloBaseModel


class SensorReading(DweloBaseModel):
    """A single sensor value reported by a device.

    Mapped from an entry of ``/v3/sensor/gateway/{gatewayId}/``.  A lock
    reports at least a ``lock`` reading (``"locked"``/``"unlocked"``) and
    usually a ``battery`` reading (percent, as a string).
    """

    kind: str = Field(alias="sensorType")
    """Sensor type (e.g. ``"lock"``, ``"battery"``)."""
    value: str = ""
    """Raw sensor value, always a string on the wire."""
    timestamp: datetime | None = Field(default=None, alias="timeIssued")
    """When the gateway recorded the value."""
    device_id: int | None = None
    gateway_id: int | None = None
    uid: int | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value
