"""resultify: exceptions and missing values as one chainable Result type.

Public API:
    - Result: ok / empty / error container with map, recover, provide,
      failsafe, filter, invoke and the first/list aggregators
    - Condition: stop conditions for repeated recovery
    - capture, quiet: adapters for fallible callables
    - config_scope, resolve_config: library configuration
"""

from __future__ import annotations

import logging

from resultify.condition import AtMost, Condition, ForDuration, Indefinitely
from resultify.config import (
    FrozenConfig,
    Settings,
    config_scope,
    current_config,
    resolve_config,
)
from resultify.errors import ConfigurationError, PanicError, ResultifyError
from resultify.result import Result
from resultify.throwing import (
    ThrowingConsumer,
    ThrowingFunction,
    ThrowingSupplier,
    capture,
    quiet,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("resultify")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("resultify").addHandler(logging.NullHandler())

__all__ = [
    "AtMost",
    "Condition",
    "ConfigurationError",
    "ForDuration",
    "FrozenConfig",
    "Indefinitely",
    "PanicError",
    "Result",
    "ResultifyError",
    "Settings",
    "ThrowingConsumer",
    "ThrowingFunction",
    "ThrowingSupplier",
    "capture",
    "config_scope",
    "current_config",
    "quiet",
    "resolve_config",
]
