"""Configuration: pydantic schema, environment resolution and ambient scope.

Resolution follows a single precedence rule:
``overrides > RESULTIFY_* environment > defaults``. A ``.env`` file in the
working directory is loaded once (via python-dotenv) before the environment
is read.

Most code never touches this module: combinators read the active
configuration through :func:`current_config`, and applications adjust it
either with environment variables or with :func:`config_scope`.
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from resultify.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "RESULTIFY_"

_LEVEL_NAMES = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# --- Schema (pydantic wall) ---


class Settings(BaseModel):
    """Single source of truth for configuration fields, types and defaults."""

    model_config = {"frozen": True, "extra": "forbid"}

    #: Log failures discarded by best-effort observers (``Result.invoke``).
    log_swallowed: bool = Field(default=True)
    swallowed_log_level: str = Field(default="DEBUG")
    #: Hard ceiling on attempts in ``Result.recover(fn, until)``; None = no cap.
    recover_attempt_limit: int | None = Field(default=None, ge=1)

    @field_validator("swallowed_log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            name = v.strip().upper()
            if name not in _LEVEL_NAMES:
                raise ValueError(f"unknown logging level {v!r}")
            return name
        return v


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Validated configuration read by the combinators."""

    log_swallowed: bool
    swallowed_log_level: str
    recover_attempt_limit: int | None

    @property
    def swallowed_level(self) -> int:
        """Numeric logging level for swallowed failures."""
        return logging.getLevelName(self.swallowed_log_level)


_DEFAULTS = FrozenConfig(**Settings().model_dump())


# --- Loaders ---

_DOTENV_LOADED: bool = False


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once, without overriding the real environment.

    Errors while locating or parsing the file are ignored so that resolution
    still works from the real environment.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    try:
        from dotenv import find_dotenv, load_dotenv

        load_dotenv(find_dotenv(usecwd=True), override=False)
    except Exception as exc:
        logger.debug("Skipping .env file: %s", exc)
    _DOTENV_LOADED = True


def _coerce_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def load_env() -> dict[str, Any]:
    """Read ``RESULTIFY_*`` variables into a plain dict of field values.

    Only known fields are read; values are coerced just enough for pydantic
    to validate them (booleans follow the ``1/true/yes/on`` convention).
    """
    config: dict[str, Any] = {}
    for name, info in Settings.model_fields.items():
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is None:
            continue
        if info.annotation is bool:
            config[name] = _coerce_bool(raw)
        elif name == "recover_attempt_limit" and raw.strip().lower() in {"", "none"}:
            config[name] = None
        else:
            config[name] = raw.strip()
    return config


# --- Public resolution API ---


def resolve_config(
    overrides: Mapping[str, Any] | None = None, **kwargs: Any
) -> FrozenConfig:
    """Resolve a :class:`FrozenConfig` from defaults, environment and overrides.

    Args:
        overrides: Field values that win over every other source.
        **kwargs: Additional overrides, merged on top of ``overrides``.

    Raises:
        ConfigurationError: When a value fails validation or names an
            unknown field.
    """
    _try_load_dotenv()
    merged: dict[str, Any] = {**load_env(), **(overrides or {}), **kwargs}
    try:
        settings = Settings(**merged)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise ConfigurationError(
            f"Invalid resultify configuration: {', '.join(fields) or 'unknown'}",
            hint=(
                "Check the RESULTIFY_* environment variables and overrides for: "
                + ", ".join(fields)
            ),
        ) from exc
    return FrozenConfig(**settings.model_dump())


# --- Ambient scope ---

_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "resultify_ambient_config", default=None
)


def _env_snapshot() -> tuple[tuple[str, str], ...]:
    return tuple(
        sorted((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
    )


@cache
def _resolve_for_env(snapshot: tuple[tuple[str, str], ...]) -> FrozenConfig:
    # Keyed on the RESULTIFY_* variables so a changed environment re-resolves.
    del snapshot
    return resolve_config()


def current_config() -> FrozenConfig:
    """Return the ambient configuration, resolving one when none is set.

    Without a scope the configuration is resolved from the environment once
    per distinct set of ``RESULTIFY_*`` values and then reused.

    Raises:
        ConfigurationError: When the environment holds an invalid value.
    """
    cfg = _AMBIENT.get()
    if cfg is not None:
        return cfg
    _try_load_dotenv()
    return _resolve_for_env(_env_snapshot())


def effective_config() -> FrozenConfig:
    """Like :func:`current_config`, but fall back to defaults when invalid.

    Used on combinator paths, which must not fail because of configuration.
    The validation problem is logged as a warning instead.
    """
    try:
        return current_config()
    except ConfigurationError as exc:
        logger.warning("%s; using default settings. %s", exc, exc.hint or "")
        return _DEFAULTS


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: Any,
) -> Iterator[FrozenConfig]:
    """Run a block with a specific configuration.

    Example:
        with config_scope(recover_attempt_limit=10):
            Result.from_call(load).recover(reload, Condition.indefinitely())
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        cfg = resolve_config({**(cfg_or_overrides or {}), **overrides})

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)
