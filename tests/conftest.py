"""
Pytest configuration and fixtures for settings accessor tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from opts.accessor import SettingsAccessor
from opts.config import Settings, clear_settings_cache
from opts.hooks import HookRegistry
from opts.store import InMemorySettingsStore, SQLiteSettingsStore


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "OPTS_DB_PATH": str(temp_dir / "cache" / "options.db"),
        "OPTS_DEFAULT_GROUP": "test-settings",
        "OPTS_INVALIDATE_ON_UPDATE": "true",
        "OPTS_LOG_LEVEL": "WARNING",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance with mock configuration."""
    from opts.config import get_settings

    settings = get_settings()
    settings.ensure_directories()
    yield settings
    clear_settings_cache()


@pytest.fixture
def memory_store() -> InMemorySettingsStore:
    """Provide an in-memory store seeded with the default group."""
    return InMemorySettingsStore(
        {
            "wps-settings": {
                "a": 1,
                "b": 2,
                "title": "Caf&#233; &amp; Bar",
                "nav": {"primary": "Main &#x26; Footer", "depth": 2},
                "enabled": True,
            },
            "theme-mods": {"color": "blue"},
        }
    )


@pytest.fixture
def sqlite_store(temp_dir: Path) -> Generator[SQLiteSettingsStore, None, None]:
    """Provide an initialized SQLite store."""
    store = SQLiteSettingsStore(temp_dir / "cache" / "options.db")
    store.init()
    yield store
    store.close()


@pytest.fixture
def hooks() -> HookRegistry:
    """Provide an empty hook registry."""
    return HookRegistry()


@pytest.fixture
def accessor(memory_store: InMemorySettingsStore, hooks: HookRegistry) -> SettingsAccessor:
    """Provide an accessor over the in-memory store."""
    return SettingsAccessor(store=memory_store, hooks=hooks)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
