import pytest
from pydantic import ValidationError

from w1therm.config import W1_BASE_PATH, Settings, get_settings


def test_settings_defaults(monkeypatch):
    for name in (
        "W1_BASE_PATH",
        "W1_MASTER_INDEX",
        "W1_ALARM_POLL_INTERVAL",
        "W1_ALARM_POLL_MAX_RETRIES",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.w1_base_path == W1_BASE_PATH
    assert settings.w1_master_index == 1
    assert settings.alarm_poll_interval_seconds == 0.75
    assert settings.alarm_poll_max_retries == 20
    assert settings.log_level == "INFO"


def test_settings_from_env_parses_bus_values(monkeypatch):
    monkeypatch.setenv("W1_BASE_PATH", "/tmp/w1")
    monkeypatch.setenv("W1_MASTER_INDEX", "2")
    monkeypatch.setenv("W1_ALARM_POLL_INTERVAL", "0.1")
    monkeypatch.setenv("W1_ALARM_POLL_MAX_RETRIES", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.w1_base_path == "/tmp/w1"
    assert settings.w1_master_index == 2
    assert settings.alarm_poll_interval_seconds == 0.1
    assert settings.alarm_poll_max_retries == 5
    assert settings.log_level == "DEBUG"


def test_zero_max_retries_means_unbounded(monkeypatch):
    monkeypatch.setenv("W1_ALARM_POLL_MAX_RETRIES", "0")
    assert Settings.from_env().alarm_poll_max_retries is None


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("W1_MASTER_INDEX", "3")
    s1 = get_settings()
    s2 = get_settings()
    assert s1 is s2
    assert s1.w1_master_index == 3
    get_settings.cache_clear()


def test_invalid_log_level_is_a_config_error(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError, match="log_level"):
        Settings.from_env()
