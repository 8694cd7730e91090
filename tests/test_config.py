import logging

from accountservice.config import AppSettings, DatabaseSettings, SeedSettings, get_settings


def test_database_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    settings = DatabaseSettings()
    assert settings.path == "accounts.db"
    assert settings.timeout == 30.0
    assert settings.reader_pool_size == 4


def test_database_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", "/tmp/other.db")
    monkeypatch.setenv("DATABASE_READER_POOL_SIZE", "8")
    settings = DatabaseSettings()
    assert settings.path == "/tmp/other.db"
    assert settings.reader_pool_size == 8


def test_seed_settings_from_env(monkeypatch):
    monkeypatch.setenv("SEED_COUNT", "25")
    monkeypatch.setenv("SEED_STRICT", "true")
    settings = SeedSettings()
    assert settings.count == 25
    assert settings.strict is True


def test_log_level_value():
    settings = AppSettings(log_level="debug")
    assert settings.log_level_value == logging.DEBUG


def test_get_settings_in_test_mode(monkeypatch):
    monkeypatch.setenv("TEST_MODE", "1")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.debug is True
        assert settings.seed.strict is True
        assert settings.db.path == "test_accounts.db"
    finally:
        get_settings.cache_clear()
