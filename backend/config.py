import os
from typing import Optional, Tuple
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, field_validator
import platformdirs

APP_NAME = "SongLibrary"
APP_AUTHOR = "SongLibraryDev"

BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_MIGRATION_DIR = os.path.join(BACKEND_DIR, "alembic")

class Settings(BaseSettings):
    # App Info
    APP_NAME: str = APP_NAME
    APP_AUTHOR: str = APP_AUTHOR
    ENV: str = "prod"

    # Storage (POSTGRES_CONN は旧環境変数名)
    DATABASE_URL: str = Field(validation_alias=AliasChoices("DATABASE_URL", "POSTGRES_CONN"))
    MIGRATION_DIR: Optional[str] = None

    # External metadata service
    EXTERNAL_API_URL: str

    # Network
    SERVER_ADDRESS: str = ":8081"

    # Logging
    LOG_DIR: str = Field(default_factory=lambda: platformdirs.user_log_dir(APP_NAME, APP_AUTHOR))
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("DATABASE_URL")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        """libpq 形式の URL を psycopg ドライバ付きの SQLAlchemy URL に揃える"""
        value = value.strip()
        if not value:
            raise ValueError("DATABASE_URL must not be empty")
        for prefix in ("postgres://", "postgresql://"):
            if value.startswith(prefix):
                return "postgresql+psycopg://" + value[len(prefix):]
        return value

    @field_validator("EXTERNAL_API_URL")
    @classmethod
    def validate_external_api_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("EXTERNAL_API_URL must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("SERVER_ADDRESS")
    @classmethod
    def validate_server_address(cls, value: str) -> str:
        host, _, port = value.rpartition(":")
        if not port.isdigit():
            raise ValueError(f"SERVER_ADDRESS must look like host:port, got {value!r}")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def server_bind(self) -> Tuple[str, int]:
        """SERVER_ADDRESS を (host, port) に分解する。ホスト省略時は全インターフェース"""
        host, _, port = self.SERVER_ADDRESS.rpartition(":")
        return host or "0.0.0.0", int(port)

    @property
    def migration_dir(self) -> str:
        if not self.MIGRATION_DIR:
            return DEFAULT_MIGRATION_DIR
        path = self.MIGRATION_DIR
        if path.startswith("file://"):
            path = path[len("file://"):]
        return os.path.abspath(path)

    @property
    def sql_echo(self) -> bool:
        return self.ENV == "dev"

settings = Settings()
