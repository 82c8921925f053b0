"""Stop conditions for repeated recovery.

``Result.recover(fn, until)`` keeps retrying ``fn`` while the result is an
error and ``until.met(result)`` is false. Recovery ends on the first
non-error result regardless of the condition, so ``indefinitely`` means
"retry until recovery succeeds".

Conditions are stateful. ``at_most`` counts every ``met`` call and
``for_duration`` fixes its deadline when it is created, so an instance is
consumed by one recovery loop. Instances are not thread-safe and should not
be shared between independent recovery chains.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
import time
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from resultify.result import Result

T = TypeVar("T")


class Condition(ABC, Generic[T]):
    """Predicate over the current ``Result`` of a recovery loop."""

    @abstractmethod
    def met(self, result: Result[T]) -> bool:
        """Return True once recovery should stop."""

    def __call__(self, result: Result[T]) -> bool:
        return self.met(result)

    @staticmethod
    def indefinitely() -> Indefinitely[Any]:
        """Never met: recovery repeats until it stops failing.

        There is no delay between attempts, so a recovery function that keeps
        failing will loop forever.
        """
        return Indefinitely()

    @staticmethod
    def at_most(max_times: int) -> AtMost[Any]:
        """Met once ``met`` has been called more than ``max_times`` times."""
        return AtMost(max_times)

    @staticmethod
    def for_duration(
        duration: timedelta | float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> ForDuration[Any]:
        """Met once ``duration`` has elapsed since the condition was created.

        Args:
            duration: A ``timedelta`` or a number of seconds.
            clock: Monotonic time source in seconds (injectable for tests).
        """
        return ForDuration(duration, clock=clock)


class Indefinitely(Condition[T]):
    """Stateless condition that is never met."""

    def met(self, result: Result[T]) -> bool:
        return False

    def __repr__(self) -> str:
        return "Condition.indefinitely()"


@dataclass
class AtMost(Condition[T]):
    """Counts ``met`` calls; met when the count exceeds ``max_times``.

    Every call counts as one attempt whether or not the recovery it follows
    succeeded, so ``calls`` is the number of evaluations so far.
    """

    max_times: int
    calls: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.max_times < 0:
            raise ValueError("at_most(max_times) requires max_times >= 0")

    def met(self, result: Result[T]) -> bool:
        self.calls += 1
        return self.calls > self.max_times


@dataclass(frozen=True)
class ForDuration(Condition[T]):
    """Met once ``clock()`` passes the deadline captured at construction."""

    duration: timedelta | float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    deadline: float = field(init=False)

    def __post_init__(self) -> None:
        seconds = (
            self.duration.total_seconds()
            if isinstance(self.duration, timedelta)
            else float(self.duration)
        )
        if seconds < 0:
            raise ValueError("for_duration(duration) requires a non-negative duration")
        object.__setattr__(self, "deadline", self.clock() + seconds)

    def met(self, result: Result[T]) -> bool:
        return self.clock() > self.deadline
