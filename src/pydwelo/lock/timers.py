"""Cancellable timer handles on the running asyncio loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


class OneShotTimer:
    """A timer that runs *callback* once, *delay* seconds after :meth:`start`.

    The callback is a plain function run directly by the event loop, so
    whatever it mutates is updated before any other task can observe it.
    Work that needs to await must be spawned as a task by the callback.
    """

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self._delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def armed(self) -> bool:
        """Whether the timer is scheduled and has not fired or been cancelled."""
        return self._handle is not None

    def start(self) -> None:
        """Arm the timer, replacing any previously scheduled expiry."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class RecurringTimer:
    """A timer that runs *callback* every *interval* seconds until cancelled.

    The next tick is scheduled before the callback runs, so a slow or
    failing callback does not shift or stop the schedule.
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self._interval = interval
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        self.cancel()
        self._schedule()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        self._schedule()
        self._callback()
