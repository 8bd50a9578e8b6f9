"""Runtime settings loaded from PETRIDISH_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PETRIDISH_", case_sensitive=False)

    staging_dir: Path | None = None
    detect_binary: bool = True
    default_output_dir: Path | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
