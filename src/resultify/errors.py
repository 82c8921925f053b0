"""Exception hierarchy for resultify."""

from __future__ import annotations


class ResultifyError(Exception):
    """Base exception for all resultify errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ResultifyError):
    """Configuration validation or resolution failed."""


class PanicError(ResultifyError):
    """A stored error escaped through ``Result.panic_or_get``.

    Only raised for stored errors that are not ``Exception`` subclasses;
    ordinary exceptions are re-raised as they are. The original error is
    available as ``error`` and as ``__cause__``.
    """

    def __init__(self, error: BaseException) -> None:
        super().__init__(
            f"Result holds a non-Exception error: {error!r}",
            hint="Handle the error with recover() or provide() before panic_or_get().",
        )
        self.error = error
