"""Configuration for the RegimenIQ backend.

Values come from environment variables prefixed with REGIMENIQ_
(e.g. REGIMENIQ_LOG_LEVEL) or from a local `.env` file.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REGIMENIQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "RegimenIQ API"
    environment: str = "development"
    log_level: str = "INFO"

    # JSON file replacing the built-in interaction rule table
    rules_path: Optional[str] = None

    max_check_workers: int = Field(4, ge=1)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
