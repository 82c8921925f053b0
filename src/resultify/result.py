"""Result: a value, no value, or the error raised while producing one.

A ``Result`` is always in exactly one of three states:

- ok: a value is present (``is_present()``)
- empty: neither value nor error (``is_empty()`` and not ``is_error()``)
- error: the exception raised while computing the value (``is_error()``)

Combinators never raise on behalf of the callables they run; a failure is
captured and carried forward as the error state. The deliberate exits are
``panic_or_get()``, which re-raises the stored error, and ``filter()``,
whose predicate is not allowed to fail.

Example:
    port = (
        Result.from_call(lambda: os.environ["PORT"])
        .map(int)
        .filter(lambda p: 0 < p < 65536)
        .recover(lambda exc: 8080)
        .get_or_failsafe(8080)
    )
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from resultify.config import effective_config
from resultify.errors import PanicError
from resultify.throwing import quiet

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from resultify.condition import Condition
    from resultify.throwing import ThrowingConsumer, ThrowingFunction, ThrowingSupplier

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, eq=True, repr=False)
class Result(Generic[T]):
    """Immutable tri-state container; see the module docstring.

    Construct with the class-method factories rather than directly. The
    constructor applies error precedence: when an error is given the result
    is an error and the value is dropped.

    Equality compares value and error. A result is hashable only when its
    value is: ``hash(Result.of([1]))`` raises ``TypeError`` like
    ``hash([1])`` does.
    """

    _value: T | None = None
    _error: BaseException | None = None

    def __post_init__(self) -> None:
        if self._error is not None:
            if not isinstance(self._error, BaseException):
                raise TypeError(
                    f"Result error must be an exception instance, got {type(self._error).__name__}"
                )
            # Error precedence: a value never survives alongside an error.
            object.__setattr__(self, "_value", None)

    # --- Factories ---

    @classmethod
    def of(
        cls,
        value: T | BaseException | None = None,
        error: BaseException | None = None,
    ) -> Result[T]:
        """Build a result from a value and/or an error.

        - ``of(value)``: ok when ``value`` is not None, else empty.
        - ``of(exc)``: an exception instance on its own is an error.
        - ``of(value, exc)``: error precedence, so the result is ``exc``.
        """
        if error is None and isinstance(value, BaseException):
            return cls(None, value)
        if value is None and error is None:
            return cls.empty()
        return cls(value, error)  # type: ignore[arg-type]

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        """Wrap ``value`` (ok unless it is None)."""
        if value is None:
            return cls.empty()
        return cls(value)

    @classmethod
    def failure(cls, error: BaseException) -> Result[T]:
        """Wrap ``error``; always an error result."""
        if error is None:
            raise TypeError("Result.failure() requires an exception instance")
        return cls(None, error)

    @classmethod
    def empty(cls) -> Result[T]:
        """Return the shared empty result."""
        return _EMPTY  # type: ignore[return-value]

    @classmethod
    def from_call(cls, fn: ThrowingSupplier[T]) -> Result[T]:
        """Call ``fn`` and capture its return value or the exception it raises."""
        try:
            return cls.ok(fn())
        except Exception as exc:
            return cls(None, exc)

    @classmethod
    def first(cls, *fns: ThrowingSupplier[T]) -> Result[T]:
        """Return the first present result of calling ``fns`` in order.

        Evaluation stops at the first callable that produces a value; the
        rest are never called. Failures of earlier callables are discarded
        (logged at DEBUG), so the result is either ok or empty.
        """
        return cls.list(fns)

    @classmethod
    def list(cls, fns: Iterable[ThrowingSupplier[T]]) -> Result[T]:
        """Like :meth:`first`, for an iterable of callables."""
        for index, fn in enumerate(fns):
            result = cls.from_call(fn)
            if result.is_present():
                return result
            if result.is_error():
                logger.debug(
                    "Candidate %d produced no value: %r", index, result.error()
                )
        return cls.empty()

    # --- Queries ---

    def get(self) -> T | None:
        """Return the value, or None when empty or failed."""
        return self._value

    def error(self) -> BaseException | None:
        """Return the stored error, or None."""
        return self._error

    def is_present(self) -> bool:
        return self._value is not None

    def is_error(self) -> bool:
        return self._error is not None

    def is_empty(self) -> bool:
        """True when no value is present, whether failed or simply empty."""
        return self.is_error() or not self.is_present()

    def as_optional(self) -> T | None:
        """Return the value as a plain optional; errors are not represented."""
        return self._value

    def panic_or_get(self) -> T | None:
        """Return the value, raising the stored error if there is one.

        An empty result returns None. Stored errors that are not ``Exception``
        subclasses are wrapped in :class:`PanicError`.
        """
        if self._error is not None:
            if isinstance(self._error, Exception):
                raise self._error
            raise PanicError(self._error) from self._error
        return self._value

    def get_or_failsafe(self, value: T) -> T | None:
        """Shorthand for ``failsafe(value).get()``."""
        return self.failsafe(value).get()

    # --- Combinators ---

    def map(self, fn: ThrowingFunction[T, R]) -> Result[R]:
        """Transform the value with ``fn``; errors pass through untouched.

        ``fn`` also runs on an empty result, receiving None. A failure raised
        by ``fn`` becomes the error of the returned result.
        """
        if self.is_error():
            return Result(None, self._error)
        try:
            return Result.ok(fn(self._value))  # type: ignore[arg-type]
        except Exception as exc:
            return Result(None, exc)

    def recover(
        self,
        fn: ThrowingFunction[BaseException, T],
        until: Condition[T] | Callable[[Result[T]], bool] | None = None,
    ) -> Result[T]:
        """Turn an error into a value with ``fn``; other states are returned as is.

        With ``until``, recovery is retried while it keeps failing and
        ``until(result)`` is false. Every attempt starts again from this
        result's error, and every evaluation of ``until`` counts toward
        stateful conditions such as ``Condition.at_most``.
        """
        if until is None:
            return self._recover_once(fn)

        limit: int | None = None
        attempts = 0
        while True:
            result = self._recover_once(fn)
            attempts += 1
            if not result.is_error() or until(result):
                return result
            if attempts == 1:
                limit = effective_config().recover_attempt_limit
            if limit is not None and attempts >= limit:
                logger.warning(
                    "Recovery stopped after %d attempts (recover_attempt_limit); last error: %r",
                    attempts,
                    result.error(),
                )
                return result

    def _recover_once(self, fn: ThrowingFunction[BaseException, T]) -> Result[T]:
        if self._error is None:
            return self
        try:
            return Result.ok(fn(self._error))
        except Exception as exc:
            return Result(None, exc)

    def invoke(self, side_effect: ThrowingConsumer[Result[T]]) -> Result[T]:
        """Run ``side_effect(self)`` on a best-effort basis and return ``self``.

        Failures raised by the side effect are discarded so that observing a
        chain can never change it; they are logged according to the
        ``log_swallowed`` and ``swallowed_log_level`` settings.
        """
        quiet(side_effect)(self)
        return self

    def provide(self, supplier: ThrowingSupplier[T]) -> Result[T]:
        """Fill a missing value (empty or failed) from ``supplier``."""
        if self.is_present():
            return self
        return Result.from_call(supplier)

    def failsafe(self, value: T) -> Result[T]:
        """Replace an empty or failed result with ``value``; the error is dropped."""
        if self.is_empty():
            return Result.ok(value)
        return self

    def filter(self, predicate: Callable[[T], bool]) -> Result[T]:
        """Demote a present value to empty unless ``predicate`` accepts it.

        Exceptions raised by ``predicate`` propagate to the caller.
        """
        if not self.is_present():
            return self
        if predicate(self._value):  # type: ignore[arg-type]
            return self
        return Result.empty()

    def if_present(self, action: Callable[[], object]) -> None:
        if self.is_present():
            action()

    def if_empty(self, action: Callable[[], object]) -> None:
        if self.is_empty():
            action()

    def if_error(self, action: Callable[[], object]) -> None:
        if self.is_error():
            action()

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.failure({self._error!r})"
        if self._value is None:
            return "Result.empty()"
        return f"Result.ok({self._value!r})"


_EMPTY: Result[Any] = Result()
