"""Adapters for fallible callables.

Combinators accept plain Python callables that are allowed to raise. The
protocols below name those shapes for annotations; the helpers adapt a
fallible callable into a non-raising one, either by capturing the outcome
in a ``Result`` (:func:`capture`) or by discarding the failure entirely
(:func:`quiet`).
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, ParamSpec, Protocol, TypeVar

from resultify.config import effective_config

if TYPE_CHECKING:
    from collections.abc import Callable

    from resultify.result import Result

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")
T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)
R_co = TypeVar("R_co", covariant=True)


class ThrowingFunction(Protocol[T_contra, R_co]):
    """One-argument callable that may raise (``map``, ``recover``)."""

    def __call__(self, arg: T_contra, /) -> R_co: ...


class ThrowingSupplier(Protocol[T_co]):
    """Zero-argument callable that may raise (``from_call``, ``provide``)."""

    def __call__(self) -> T_co: ...


class ThrowingConsumer(Protocol[T_contra]):
    """One-argument callable run for its side effect only (``invoke``)."""

    def __call__(self, arg: T_contra, /) -> object: ...


def capture(fn: Callable[P, R]) -> Callable[P, Result[R]]:
    """Decorate ``fn`` so it returns a ``Result`` instead of raising.

    Example:
        @capture
        def parse(raw: str) -> int:
            return int(raw)

        parse("12").get()      # 12
        parse("x").is_error()  # True
    """
    from resultify.result import Result

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[R]:
        return Result.from_call(lambda: fn(*args, **kwargs))

    return wrapper


def quiet(consumer: ThrowingConsumer[Any]) -> Callable[[Any], None]:
    """Adapt ``consumer`` into a best-effort callable that never raises.

    Any ``Exception`` raised by ``consumer`` is discarded. When
    ``log_swallowed`` is enabled the failure is logged (with traceback) at
    ``swallowed_log_level``; the return value is always ``None``.
    """

    @functools.wraps(consumer)
    def wrapper(arg: Any) -> None:
        try:
            consumer(arg)
        except Exception as exc:
            cfg = effective_config()
            if cfg.log_swallowed:
                logger.log(
                    cfg.swallowed_level,
                    "Discarded failure from best-effort side effect %r: %s",
                    getattr(consumer, "__qualname__", consumer),
                    exc,
                    exc_info=exc,
                )

    return wrapper
