import pytest

from app import config
from app.common import json_store

pytest_plugins = ["tests.fixtures.relay"]


# Reset the global app config variable before each test
@pytest.fixture(autouse=True)
def reset_app_config():
    config.config = None
    yield
    config.config = None


@pytest.fixture(autouse=True)
def reset_stores():
    json_store._stores.clear()
    yield
    json_store._stores.clear()


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch, data_dir):
    """Set environment variables for the test session."""
    monkeypatch.setenv("PORT", "8000")
    monkeypatch.setenv("LOG_CONFIG", "logging.json")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:test-token")  # noqa: S105
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "-1001234567890")
    monkeypatch.setenv("TELEGRAM_API_URL", "https://telegram.test")
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.delenv("URGENT_KEYWORDS", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)

    return
