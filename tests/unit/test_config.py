from __future__ import annotations

import pytest

from sqlnorm.config import Settings, get_settings

DEFAULT_MYSQL_PORT = 3306


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    monkeypatch.chdir(tmp_path)  # no stray .env
    for name in (
        "NORM_DIALECT",
        "NORM_DATA_SOURCE",
        "NORM_DB_HOST",
        "NORM_DB_PORT",
        "NORM_DB_USER",
        "NORM_DB_PASSWORD",
        "NORM_DB_NAME",
        "NORM_CONNECT_ATTEMPTS",
        "LOG_LEVEL",
        "LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_get_settings_defaults(clean_env) -> None:
    settings = get_settings()
    assert settings.dialect == "sqlite"
    assert settings.data_source == ":memory:"
    assert settings.db_host == "localhost"
    assert settings.db_port == DEFAULT_MYSQL_PORT
    assert settings.connect_attempts == 3
    assert settings.log_level == "INFO"
    assert settings.log_json is False


def test_settings_read_prefixed_environment(clean_env) -> None:
    clean_env.setenv("NORM_DIALECT", "mysql")
    clean_env.setenv("NORM_DB_PORT", "3307")
    clean_env.setenv("LOG_JSON", "true")

    settings = Settings()

    assert settings.dialect == "mysql"
    assert settings.db_port == 3307
    assert settings.log_json is True


def test_settings_reject_unknown_dialect(clean_env) -> None:
    clean_env.setenv("NORM_DIALECT", "postgres")
    with pytest.raises(ValueError):
        Settings()


def test_settings_read_dotenv_file(clean_env, tmp_path) -> None:
    (tmp_path / ".env").write_text("NORM_DATA_SOURCE=app.db\n", encoding="utf-8")
    assert Settings().data_source == "app.db"


def test_get_settings_is_cached(clean_env) -> None:
    assert get_settings() is get_settings()
