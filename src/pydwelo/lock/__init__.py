"""Lock command reconciliation.

One :class:`LockAccessory` per physical lock; accessories share no state.
"""

from pydwelo.lock.accessory import LockAccessory, LockBackend
from pydwelo.lock.exposition import LockAttributes, LockExposition
from pydwelo.lock.session import CommandSession
from pydwelo.lock.timers import OneShotTimer, RecurringTimer
from pydwelo.lock.translate import to_battery_status, to_lock_state

__all__ = [
    "CommandSession",
    "LockAccessory",
    "LockAttributes",
    "LockBackend",
    "LockExposition",
    "OneShotTimer",
    "RecurringTimer",
    "to_battery_status",
    "to_lock_state",
]
