from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="TT_", case_sensitive=False)

    app_name: str = "ttrack"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 3000

    storage_backend: str = "sqlite"
    sqlite_path: Path = Path("./data/ttrack.db")

    # comma separated
    cors_origins: str = "*"

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @computed_field
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()

settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=level or settings.log_level, format=settings.log_format)
