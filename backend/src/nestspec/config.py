"""Runtime configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field(default="local", alias="ENVIRONMENT")
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")
    show_tracebacks: bool = Field(default=True, alias="NESTSPEC_SHOW_TRACEBACKS")
    spec_pattern: str = Field(default="*_spec.py", alias="NESTSPEC_PATTERN")


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
