"""
plan_memory.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the persistence core.
- Offer a cached settings instance for process-wide use.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PLAN_MEMORY_", case_sensitive=False)

    # dev/test create tables on init; prod relies on Alembic migrations.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "plan-memory"
    log_level: str = "INFO"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./memory.db"
    sql_echo: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly instead of going through the cache.
