"""pydwelo - Async Python client and lock reconciliation for the Dwelo API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pydwelo")
except PackageNotFoundError:
    __version__ = "0+local"
from pydwelo.client import DweloClient
from pydwelo.config import DweloConfig
from pydwelo.exceptions import (
    DweloApiError,
    DweloConfigError,
    DweloError,
    DweloTransportError,
)
from pydwelo.lock import LockAccessory, LockAttributes, LockBackend, LockExposition
from pydwelo.models import (
    BatteryStatus,
    Device,
    DeviceType,
    LockState,
    SensorReading,
    TargetState,
)
from pydwelo.platform import DweloPlatform

__all__ = [
    "__version__",
    "BatteryStatus",
    "Device",
    "DeviceType",
    "DweloApiError",
    "DweloClient",
    "DweloConfig",
    "DweloConfigError",
    "DweloError",
    "DweloPlatform",
    "DweloTransportError",
    "LockAccessory",
    "LockAttributes",
    "LockBackend",
    "LockExposition",
    "LockState",
    "SensorReading",
    "TargetState",
]
