"""Pytest fixtures for cli-select tests."""

import io
import os
from collections.abc import Callable

import pytest

from cli_select.models import KeyEvent


@pytest.fixture(autouse=True)
def clear_caches():
    """Clear module-level caches before each test."""
    from cli_select.config import clear_config_cache

    clear_config_cache()

    yield

    # Also clear after test (cleanup)
    clear_config_cache()


@pytest.fixture
def config_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point the config directory at an empty temp dir."""
    config_dir = tmp_path / "cli-select"
    for name in list(os.environ):
        if name.startswith("CLI_SELECT_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("CLI_SELECT_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def scripted() -> Callable[..., Callable[[], KeyEvent]]:
    """Build an event source that replays the given keys, then fails."""

    def build(*keys):
        events = iter([KeyEvent.of(k) for k in keys])
        return lambda: next(events)

    return build
