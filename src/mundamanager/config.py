"""Application settings for the Munda Manager backend."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from the environment and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="MUNDA_", extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./mundamanager.db", description="SQLAlchemy database URL"
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements to the log")
    database_pool_size: int = Field(default=5, description="Connection pool size", ge=1)
    database_max_overflow: int = Field(
        default=10, description="Connections allowed above the pool size", ge=0
    )
    database_pool_recycle: int = Field(
        default=1800, description="Seconds before a pooled connection is recycled"
    )
    database_pool_timeout: int = Field(
        default=30, description="Seconds to wait for a pooled connection", gt=0
    )
    starting_credits: int = Field(
        default=1000, description="Credits a newly created gang starts with", ge=0
    )
    starting_reputation: int = Field(
        default=1, description="Reputation a newly created gang starts with", ge=0
    )
    seed_catalog: bool = Field(
        default=True, description="Seed reference data on API startup when tables are empty"
    )
    log_level: str = Field(default="INFO", description="Root log level for the server")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
