"""Bookkeeping for the single in-flight command of a lock."""

from __future__ import annotations

from dataclasses import dataclass

from pydwelo.models.lock import TargetState


@dataclass
class CommandSession:
    """Command session of one lock.

    ``in_flight`` is true from the moment a command is dispatched until
    the lock is observed in the desired state, the dispatch fails, or the
    watchdog gives up.  ``desired_target`` outlives the session: it is
    the cached answer to "what was this lock last asked to be".

    ``generation`` increases with every dispatched command so that late
    results of an abandoned command can be told apart from the current one.
    """

    in_flight: bool = False
    desired_target: TargetState | None = None
    generation: int = 0

    def is_duplicate(self, target: TargetState) -> bool:
        """Whether *target* repeats the command already in flight."""
        return self.in_flight and self.desired_target == target

    def is_current(self, generation: int) -> bool:
        """Whether the command of *generation* is still the one in flight."""
        return self.in_flight and self.generation == generation

    def begin(self, target: TargetState) -> int:
        self.desired_target = target
        self.in_flight = True
        self.generation += 1
        return self.generation

    def end(self) -> None:
        self.in_flight = False
