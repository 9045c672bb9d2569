"""Pytest configuration to make the project root importable.

The service runs from the repository root with flat imports
(``from managers.background_manager import ...``); tests do the same.
"""

import os
import sys
import tempfile

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Keep tests away from a real system config and upload directory
_TEST_ROOT = tempfile.mkdtemp(prefix="bg-tests-")
os.environ["SYSCONFIG_PATH"] = os.path.join(_TEST_ROOT, "missing-sysconfig.yaml")
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["PARTICLES_DIR"] = os.path.join(_TEST_ROOT, "particles")
os.environ.pop("UNSPLASH_API_KEY", None)

import pytest  # noqa: E402

from managers.sysconfig import SystemConfig, reload_config  # noqa: E402
from utils.httpcache import http_cache  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_state():
    """Every test starts with an empty listing cache and unloaded config."""
    http_cache.clear()
    reload_config()
    yield
    http_cache.clear()
    reload_config()


@pytest.fixture
def unsplash_config(monkeypatch):
    """System config with an Unsplash key, as seen by the providers."""
    config = SystemConfig(unsplash_api_key="test-key", user_agent="tests/1.0")

    async def fake_get_config():
        return config

    monkeypatch.setattr("managers.background_providers.get_config", fake_get_config)
    return config
