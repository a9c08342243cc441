import os
import pytest
from pydantic import ValidationError
from config import Settings, DEFAULT_MIGRATION_DIR

def make_settings(**overrides) -> Settings:
    values = {"DATABASE_URL": "sqlite://", "EXTERNAL_API_URL": "http://metadata.test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)

@pytest.mark.parametrize("url, expected", [
    ("postgres://user:pass@db:5432/songs", "postgresql+psycopg://user:pass@db:5432/songs"),
    ("postgresql://user:pass@db/songs?sslmode=disable", "postgresql+psycopg://user:pass@db/songs?sslmode=disable"),
    ("postgresql+psycopg://db/songs", "postgresql+psycopg://db/songs"),
    ("sqlite:///songs.db", "sqlite:///songs.db"),
])
def test_database_url_normalization(url, expected):
    assert make_settings(DATABASE_URL=url).DATABASE_URL == expected

def test_legacy_postgres_conn_variable(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_CONN", "postgres://legacy@db/songs")
    monkeypatch.setenv("EXTERNAL_API_URL", "https://metadata.example.com/")

    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "postgresql+psycopg://legacy@db/songs"
    assert settings.EXTERNAL_API_URL == "https://metadata.example.com"

def test_missing_required_values(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_CONN", raising=False)
    monkeypatch.delenv("EXTERNAL_API_URL", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)

@pytest.mark.parametrize("url", ["metadata.test", "ftp://metadata.test", ""])
def test_external_api_url_must_be_http(url):
    with pytest.raises(ValidationError):
        make_settings(EXTERNAL_API_URL=url)

@pytest.mark.parametrize("address, expected", [
    (":8081", ("0.0.0.0", 8081)),
    ("127.0.0.1:9000", ("127.0.0.1", 9000)),
    ("localhost:80", ("localhost", 80)),
])
def test_server_bind(address, expected):
    assert make_settings(SERVER_ADDRESS=address).server_bind == expected

@pytest.mark.parametrize("address", ["localhost", "localhost:", "localhost:http"])
def test_server_address_invalid(address):
    with pytest.raises(ValidationError):
        make_settings(SERVER_ADDRESS=address)

def test_migration_dir(tmp_path):
    assert make_settings().migration_dir == DEFAULT_MIGRATION_DIR
    assert make_settings(MIGRATION_DIR=f"file://{tmp_path}").migration_dir == str(tmp_path)
    assert make_settings(MIGRATION_DIR=str(tmp_path)).migration_dir == str(tmp_path)

def test_log_level_and_echo():
    settings = make_settings(LOG_LEVEL="debug", ENV="dev")
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.sql_echo is True
    assert make_settings().sql_echo is False

def test_log_dir_default(monkeypatch):
    monkeypatch.delenv("LOG_DIR", raising=False)
    log_dir = make_settings().LOG_DIR
    assert log_dir
    assert os.path.isabs(log_dir)
