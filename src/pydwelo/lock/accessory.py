"""Command reconciliation for a single polled lock.

A Dwelo lock cannot push its state: the only ground truth is what the
next sensor poll reports, and a lock/unlock command is only known to
have worked once a poll shows the lock in the requested state.
:class:`LockAccessory` ties that together:

* a poll timer fetches readings, updates the exposed attributes, keeps
  the auto-lock timer in step with the observed state and closes the
  command session once the lock reaches its target;
* :meth:`LockAccessory.request_target` runs at most one command at a
  time, coalescing repeats of the in-flight target;
* a watchdog of two poll intervals abandons commands that never
  converge and falls back to the observed state;
* an optional auto-lock timer relocks a lock left unsecured.

Every state change happens synchronously between awaits on the backend,
so no lock is needed on the single event loop thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Sequence
from typing import Any, Protocol

from pydwelo._constants import WATCHDOG_POLL_FACTOR
from pydwelo.exceptions import DweloConfigError, DweloError
from pydwelo.lock.exposition import LockAttributes, LockExposition
from pydwelo.lock.session import CommandSession
from pydwelo.lock.timers import OneShotTimer, RecurringTimer
from pydwelo.lock.translate import to_battery_status, to_lock_state
from pydwelo.models.lock import LockState, TargetState
from pydwelo.models.sensor import SensorReading

_logger = logging.getLogger(__name__)


class LockBackend(Protocol):
    """Device access needed by a :class:`LockAccessory`.

    :class:`pydwelo.client.DweloClient` is the production implementation.
    """

    async def get_sensors(self, device_id: int) -> list[SensorReading]:
        ...

    async def toggle_lock(self, device_id: int, locked: bool) -> None:
        ...


class LockAccessory:
    """Reconciles requested and observed state of one lock.

    Parameters
    ----------
    name
        Display name, used in logs.
    lock_id
        Dwelo device id of the lock.
    backend
        Sensor query / command transport.
    poll_interval_ms
        Interval between polls.  The command watchdog is twice this.
    auto_lock_minutes
        Delay before an unsecured lock is relocked; ``0`` disables.
    exposition
        Where attribute updates are published.  Defaults to a fresh
        :class:`LockAttributes`.

    Polling starts with :meth:`start` (or ``async with``), which must be
    called from a running event loop.
    """

    def __init__(
        self,
        name: str,
        lock_id: int,
        backend: LockBackend,
        *,
        poll_interval_ms: int = 5000,
        auto_lock_minutes: float = 0,
        exposition: LockExposition | None = None,
    ) -> None:
        if poll_interval_ms <= 0:
            raise DweloConfigError(f"poll_interval_ms must be positive, got {poll_interval_ms}")
        if auto_lock_minutes < 0:
            raise DweloConfigError(f"auto_lock_minutes must not be negative, got {auto_lock_minutes}")

        self._name = name
        self._lock_id = lock_id
        self._backend = backend
        self._auto_lock_minutes = auto_lock_minutes
        self._exposition: LockExposition = exposition if exposition is not None else LockAttributes()

        self._session = CommandSession()
        self._readings: tuple[SensorReading, ...] = ()

        poll_interval = poll_interval_ms / 1000.0
        self._poll_timer = RecurringTimer(poll_interval, self._on_poll_tick)
        self._watchdog = OneShotTimer(WATCHDOG_POLL_FACTOR * poll_interval, self._on_watchdog_expired)
        self._auto_lock_timer = OneShotTimer(auto_lock_minutes * 60.0, self._on_auto_lock_expired)

        self._poll_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

        _logger.info("Dwelo lock '%s' created", name)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def lock_id(self) -> int:
        return self._lock_id

    @property
    def exposition(self) -> LockExposition:
        return self._exposition

    @property
    def observed_state(self) -> LockState:
        """Lock state derived from the most recent successful query."""
        return to_lock_state(self._readings)

    @property
    def desired_target(self) -> TargetState | None:
        return self._session.desired_target

    @property
    def in_flight(self) -> bool:
        return self._session.in_flight

    @property
    def watchdog_armed(self) -> bool:
        return self._watchdog.armed

    @property
    def auto_lock_armed(self) -> bool:
        return self._auto_lock_timer.armed

    @property
    def auto_lock_enabled(self) -> bool:
        return self._auto_lock_minutes > 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start polling the lock."""
        if self._closed:
            raise DweloError(f"Lock '{self._name}' is closed")
        if self._poll_timer.armed:
            return
        self._poll_timer.start()
        _logger.info("Polling lock '%s' every %gs", self._name, self._poll_timer.interval)

    async def close(self) -> None:
        """Stop polling, disarm every timer and cancel background work."""
        self._closed = True
        self._poll_timer.cancel()
        self._watchdog.cancel()
        self._auto_lock_timer.cancel()
        self._session.end()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        _logger.info("Dwelo lock '%s' closed", self._name)

    async def __aenter__(self) -> LockAccessory:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def wait_pending(self) -> None:
        """Wait until every background poll, command and reconciliation has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, Any], label: str) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro, name=f"pydwelo-{label}-{self._lock_id}")
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Background task %s of lock '%s' failed", task.get_name(), self._name, exc_info=exc)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def _observe(self, readings: Sequence[SensorReading]) -> LockState:
        """Record a fresh reading set and publish what it says."""
        self._readings = tuple(readings)

        battery = to_battery_status(self._readings)
        if battery is not None:
            self._exposition.update_battery(battery)
            _logger.debug("Lock '%s' battery: %d%%", self._name, battery.percent)

        state = to_lock_state(self._readings)
        self._exposition.update_current_state(state)
        if state != LockState.UNSECURED and self._auto_lock_timer.armed:
            self._auto_lock_timer.cancel()
            _logger.debug("Auto-lock of '%s' cancelled; lock is %s", self._name, state.name)
        return state

    async def get_lock_state(self) -> LockState:
        """Query the lock now and publish the result.

        A failed query is logged and the last observed state is returned.
        """
        try:
            readings = await self._backend.get_sensors(self._lock_id)
        except Exception:
            _logger.warning(
                "Failed to fetch status of lock '%s'; using last observed state",
                self._name,
                exc_info=True,
            )
            return self.observed_state
        state = self._observe(readings)
        _logger.debug("Current state of lock '%s': %s", self._name, state.name)
        return state

    def _on_poll_tick(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            _logger.debug("Skipping poll of lock '%s'; previous poll still running", self._name)
            return
        self._poll_task = self._spawn(self.poll(), "poll")

    async def poll(self) -> None:
        """Run one poll cycle.

        Fetches readings, publishes current state and battery, updates the
        auto-lock timer and checks whether the in-flight command finished.
        A failed fetch changes nothing; the next tick retries.
        """
        try:
            readings = await self._backend.get_sensors(self._lock_id)
        except Exception:
            _logger.warning("Failed to fetch status of lock '%s'", self._name, exc_info=True)
            return

        state = self._observe(readings)
        self._schedule_auto_lock(state)
        self.completion_check(state)

    # ------------------------------------------------------------------
    # Session management
    # ------------------------------------------------------------------

    async def current_target(self) -> TargetState:
        """Target the lock was last asked to reach.

        Before any request, the observed state stands in for the target.
        """
        if self._session.desired_target is not None:
            return self._session.desired_target
        return TargetState.from_lock_state(await self.get_lock_state())

    async def request_target(self, target: TargetState) -> None:
        """Ask the lock to reach *target*.

        Returns once the request is accepted; the command itself runs in
        the background and is confirmed by a later poll.  Repeating the
        in-flight target is a no-op.  A different target while a command
        is in flight replaces the target the next poll compares against,
        without sending another command.
        """
        if self._closed:
            raise DweloError(f"Lock '{self._name}' is closed")
        target = TargetState(target)

        if self._session.is_duplicate(target):
            _logger.debug("Coalescing duplicate request for lock '%s': %s", self._name, target.name)
            return

        self._session.desired_target = target
        self._exposition.update_target_state(target)
        _logger.info("Setting lock '%s' to %s", self._name, target.name)

        if self._session.in_flight:
            _logger.info(
                "Command already in flight for lock '%s'; %s recorded without a new command",
                self._name,
                target.name,
            )
            return

        generation = self._session.begin(target)
        self._spawn(self._send_lock_command(target, generation), "command")
        self._watchdog.start()

    async def _send_lock_command(self, target: TargetState, generation: int) -> None:
        try:
            await self._backend.toggle_lock(self._lock_id, target == TargetState.SECURED)
        except Exception:
            if not self._session.is_current(generation):
                _logger.debug("Ignoring failure of abandoned command for lock '%s'", self._name, exc_info=True)
                return
            _logger.warning("Lock command for '%s' failed", self._name, exc_info=True)
            self._session.end()
            self._watchdog.cancel()
            await self.reconcile()

    def completion_check(self, observed: LockState) -> bool:
        """Close the in-flight session if *observed* is its target state.

        Returns whether a session was closed.
        """
        target = self._session.desired_target
        if not self._session.in_flight or target is None:
            return False
        if observed != target.expected_lock_state():
            return False
        self._session.end()
        self._watchdog.cancel()
        _logger.info("Lock '%s' reached %s", self._name, target.name)
        return True

    def _on_watchdog_expired(self) -> None:
        _logger.warning("Command watchdog for lock '%s' expired; reconciling", self._name)
        self._session.end()
        self._spawn(self.reconcile(), "reconcile")

    async def reconcile(self) -> TargetState:
        """Give up on the requested target in favour of the observed state."""
        generation = self._session.generation
        state = await self.get_lock_state()
        target = TargetState.from_lock_state(state)
        if self._session.generation != generation:
            # A newer command started while we were querying; it owns the target now.
            _logger.debug("Skipping reconciliation of lock '%s'; a newer command was issued", self._name)
            return target
        self._session.desired_target = target
        self._exposition.update_target_state(target)
        _logger.info("Lock '%s' target reconciled to %s", self._name, target.name)
        return target

    # ------------------------------------------------------------------
    # Auto-lock
    # ------------------------------------------------------------------

    def _schedule_auto_lock(self, state: LockState) -> None:
        # Cancellation happens in _observe, for every fresh reading set.
        if state == LockState.UNSECURED and self.auto_lock_enabled and not self._auto_lock_timer.armed:
            self._auto_lock_timer.start()
            _logger.info("Auto-lock of '%s' scheduled in %g minute(s)", self._name, self._auto_lock_minutes)

    def _on_auto_lock_expired(self) -> None:
        _logger.info("Auto-lock timer of '%s' elapsed (%gm); relocking", self._name, self._auto_lock_minutes)
        self._spawn(self._auto_relock(), "auto-lock")

    async def _auto_relock(self) -> None:
        try:
            await self.request_target(TargetState.SECURED)
        except Exception:
            _logger.warning("Auto-lock attempt for '%s' failed", self._name, exc_info=True)
