"""Test helpers (small, reusable doubles).

Keep this file tiny: recording callables shared by the Result and Condition
suites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Scripted:
    """Callable that plays back a script of values and exceptions.

    Each call consumes one item; exceptions are raised, anything else is
    returned. Once the script runs out the last item is repeated.
    """

    script: list[Any] = field(default_factory=list)
    calls: int = 0
    args: list[tuple[Any, ...]] = field(default_factory=list)

    def __call__(self, *args: Any) -> Any:
        self.calls += 1
        self.args.append(args)
        if not self.script:
            return None
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item
        return item


def failing(exc: BaseException | None = None) -> Scripted:
    """A callable that always raises ``exc`` (RuntimeError by default)."""
    return Scripted([exc if exc is not None else RuntimeError("fail")])


def returning(value: Any) -> Scripted:
    """A callable that always returns ``value``."""
    return Scripted([value])


@dataclass
class FakeClock:
    """Manually advanced monotonic clock for duration conditions."""

    now: float = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
