"""
Pytest configuration and fixtures.

Isolates the config directory and provider credentials so tests never touch
the real home directory or network.
"""

import pytest

from promptline.config.settings import DEFAULT_API_KEY_VARS, Settings
from promptline.llm.model_cache import ModelCache
from tests.fakes import FakeAdapter, FakeClock


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point the config dir at tmp_path and clear provider credentials."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in DEFAULT_API_KEY_VARS.values():
        monkeypatch.delenv(var, raising=False)
    yield


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Settings with built-in defaults only."""
    return Settings()


@pytest.fixture
def cache(clock):
    return ModelCache(clock=clock)


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "cache" / "model_cache.json"


@pytest.fixture
def fake_adapter(settings):
    return FakeAdapter(settings)
