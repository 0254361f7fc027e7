"""Application settings powered by :mod:`pydantic_settings`."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic.functional_validators import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VIEWER_URL = "https://mkusaka.github.io/ccusageview/"


class Settings(BaseSettings):
    """Centralized configuration for the CLI and the short-link service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    log_level: str = Field(
        default="WARNING",
        alias="USAGEVIEW_LOG_LEVEL",
        description="Logging verbosity.",
    )
    viewer_url: str = Field(
        default=DEFAULT_VIEWER_URL,
        alias="USAGEVIEW_URL",
        description="Base URL of the hosted viewer that decodes '#data=' fragments.",
    )
    shortlink_api_url: str | None = Field(
        default=None,
        alias="USAGEVIEW_SHORTLINK_API",
        description="Origin of the short-link service; defaults to the viewer origin.",
    )
    database_path: Path = Field(
        default=Path("~/.usageview/shortlinks.db"),
        alias="USAGEVIEW_DB_PATH",
        description="SQLite file backing the short-link store.",
    )
    server_host: str = Field(
        default="127.0.0.1",
        alias="USAGEVIEW_SERVER_HOST",
        description="Interface the short-link service binds to.",
    )
    server_port: int = Field(
        default=8787,
        alias="USAGEVIEW_SERVER_PORT",
        ge=1,
        le=65535,
        description="Port used by the short-link service.",
    )
    short_id_length: int = Field(
        default=10,
        alias="USAGEVIEW_SHORT_ID_LENGTH",
        ge=4,
        le=64,
        description="Length of generated short-link identifiers.",
    )
    request_timeout: float = Field(
        default=10.0,
        alias="USAGEVIEW_REQUEST_TIMEOUT",
        ge=0,
        description="Timeout (in seconds) applied to short-link API requests.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("database_path", mode="before")
    @classmethod
    def _coerce_database_path(cls, value: str | Path) -> Path:
        return Path(value)


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


__all__ = ["DEFAULT_VIEWER_URL", "Settings", "get_settings"]
