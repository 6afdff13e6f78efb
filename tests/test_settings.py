import pytest

from weatherbot.errors import ConfigurationError
from weatherbot.settings import Settings


@pytest.fixture
def settings(tmp_path):
    """Create a settings store in a temporary directory"""
    return Settings(cache_dir=str(tmp_path))


def test_settings_basic_operations(settings):
    settings.set("test_key", "test_value")
    assert settings.get("test_key") == "test_value"

    assert settings.get("nonexistent", "default") == "default"

    settings.set("test_key", "new_value")
    assert settings.get("test_key") == "new_value"

    settings.delete_setting("test_key")
    assert settings.get("test_key") is None


def test_settings_list(settings):
    settings.set("key1", "value1")
    settings.set("key2", "value2")

    settings_list = settings.list_settings()
    assert len(settings_list) == 2
    assert "key1" in settings_list
    assert "key2" in settings_list


def test_environment_fallback(settings, monkeypatch):
    monkeypatch.setenv("QWEATHER_API_URL", "https://env.example.com")
    assert settings.get("QWEATHER_API_URL") == "https://env.example.com"

    settings.set("QWEATHER_API_URL", "https://stored.example.com")
    assert settings.get("QWEATHER_API_URL") == "https://stored.example.com"


def test_get_float(settings):
    assert settings.get_float("QWEATHER_TIMEOUT", 10.0) == 10.0
    settings.set("QWEATHER_TIMEOUT", 2.5)
    assert settings.get_float("QWEATHER_TIMEOUT", 10.0) == 2.5
    settings.set("QWEATHER_TIMEOUT", "later")
    with pytest.raises(ConfigurationError):
        settings.get_float("QWEATHER_TIMEOUT", 10.0)
