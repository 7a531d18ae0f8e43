"""
Configuration settings for comment-sync.

Uses Pydantic Settings to load the PostgreSQL credentials from the environment
(and an optional `.env` file). Unset variables read as empty strings and are
embedded as-is into the DSN; a bad value surfaces later as a connection error.
The database host is fixed to localhost and is not read from the environment.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from comment_sync.errors import ConfigurationError

DB_HOST = "localhost"
API_BASE_URL = "https://jsonplaceholder.typicode.com"
DESTINATION_TABLE = "comments"
HTTP_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    # Database
    pg_port: str = Field("", alias="PG_PORT")
    pg_database_name: str = Field("", alias="PG_DATABASE_NAME")
    pg_user: str = Field("", alias="PG_USER")
    pg_password: str = Field("", alias="PG_PASSWORD")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


def load_settings() -> Settings:
    """
    Build a fresh Settings instance, wrapping any failure as ConfigurationError.
    """
    try:
        return Settings()
    except (ValidationError, OSError, ValueError) as exc:
        raise ConfigurationError("Error loading environment", original_exception=exc) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return load_settings()


def build_dsn(settings: Settings) -> str:
    """Compose the libpq keyword DSN for the fixed local host."""
    return (
        f"host={DB_HOST} port={settings.pg_port} dbname={settings.pg_database_name} "
        f"user={settings.pg_user} password={settings.pg_password} sslmode=disable"
    )


__all__ = [
    "API_BASE_URL",
    "DB_HOST",
    "DESTINATION_TABLE",
    "HTTP_TIMEOUT_SECONDS",
    "Settings",
    "build_dsn",
    "get_settings",
    "load_settings",
]
