from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console

    # Schema defaults
    DEFAULT_UNKNOWN_KEYS: Literal["passthrough", "strict"] = "passthrough"

    model_config = SettingsConfigDict(env_prefix="WENFIT_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
