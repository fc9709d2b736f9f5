"""Runtime settings, read from ``PLANNER_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PLANNER_", env_file=".env", extra="ignore")

    catalog_base_url: str = "http://localhost:5173"
    catalog_timeout: float = Field(default=10.0, gt=0)
    # 0 = Monday ... 6 = Sunday
    first_weekday: int = Field(default=6, ge=0, le=6)
    page_size: int = Field(default=100, gt=0)
    recurrence_horizon_days: int = Field(default=365, gt=0)
    max_occurrences: int = Field(default=1000, gt=0)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
