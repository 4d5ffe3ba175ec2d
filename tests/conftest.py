"""
Shared fixtures.

Each test gets a fresh Settings instance pointing the upload directory at a
tmp path, and freshly built apps so settings changes take effect.
"""

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.factory import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture(autouse=True)
def settings_env(monkeypatch, upload_dir):
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("RENDER_INLINE_FONTS", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    get_settings.cache_clear()


@pytest.fixture
def api_client():
    from app.api.routes import router
    return TestClient(create_app("test-api", "test", [router]))


@pytest.fixture
def render_client():
    from app.api.render_routes import router
    return TestClient(create_app("test-render", "test", [router]))


def leftover_files(directory) -> list:
    if not directory.exists():
        return []
    return list(directory.iterdir())
