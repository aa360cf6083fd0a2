import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from tacmap import create_app  # noqa: E402
from tacmap.generation.config import ENV_KEYS  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_map_env(monkeypatch):
    """Keep MAP_* variables from the developer shell or a local .env out of tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield test_app
    finally:
        ctx.pop()


def pytest_configure(config):  # register custom marker
    config.addinivalue_line("markers", "performance: timing guard for generation runtime")
