import pytest
from pydantic import ValidationError as PydanticValidationError

from notebook_api.config import PLACEHOLDER_DATABASE_URL, Settings


def test_settings_load_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/nb")
    monkeypatch.setenv("BACKEND_PORT", "9000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = Settings(_env_file=None)
    assert s.database_url == "postgresql+asyncpg://u:p@db:5432/nb"
    assert s.backend_port == 9000
    assert s.log_level == "DEBUG"
    assert not s.is_sqlite


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    s = Settings(_env_file=None)
    assert s.cors_origins_list == ["http://a.test", "http://b.test"]


def test_invalid_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None)


def test_placeholder_database_url_fails_production_check(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", PLACEHOLDER_DATABASE_URL)
    s = Settings(_env_file=None)
    with pytest.raises(ValueError, match="DATABASE_URL"):
        s.validate_required_for_production()


def test_sqlite_url_detected(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./x.db")
    assert Settings(_env_file=None).is_sqlite
