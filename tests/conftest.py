"""Pytest configuration and fixtures.

Provides environment isolation and marker-driven opt-outs. All fixtures here
are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import os

import pytest

import resultify.config

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )
    monkeypatch.setattr(resultify.config, "_DOTENV_LOADED", True)


@pytest.fixture(autouse=True)
def isolate_resultify_env(request, monkeypatch):
    """Clear RESULTIFY_* variables so each test starts from the defaults.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    resultify.config._resolve_for_env.cache_clear()
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith(resultify.config.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def boom() -> RuntimeError:
    """A reusable exception instance for identity assertions."""
    return RuntimeError("boom")
