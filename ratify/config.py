from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    LOG_RULE_OVERRIDES: bool = True

    # Aggregation
    MAX_CONCURRENT_CHECKS: int | None = Field(default=None, ge=1)  # None runs every child check at once

    class Config:
        env_prefix = "RATIFY_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
