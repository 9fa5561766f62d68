"""Device model."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field, field_validator

from pydwelo.models._base import DweloBaseModel


class DeviceType(enum.StrEnum):
    """Device types reported by ``/v3/device``."""

    LOCK = "lock"
    SWITCH = "switch"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> DeviceType:
        return cls.UNKNOWN


class Device(DweloBaseModel):
    """A device registered on a Dwelo gateway."""

    uid: int
    """Device identifier used by the sensor and command endpoints."""
    given_name: str = ""
    """User-facing device name."""
    device_type: DeviceType = DeviceType.UNKNOWN
    gateway_id: str = ""
    local_id: str = ""
    address_id: int | None = None
    date_registered: str = ""
    is_active: bool = True
    is_online: bool = True
    leasee: int | None = None
    device_metadata: dict[str, str] = Field(default_factory=dict, alias="device_metadata")
    metadata_id: str = Field(default="", alias="metadata_id")

    @field_validator("gateway_id", "local_id", "metadata_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def is_lock(self) -> bool:
        return self.device_type == DeviceType.LOCK
