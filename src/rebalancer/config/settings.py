"""Application settings using Pydantic."""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".rebalancer"

CONSOLE_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REBALANCER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Rebalance settings
    cash_shortfall_policy: Literal["clamp", "raise"] = Field(default="clamp")
    decimal_precision: int = Field(default=28, ge=1)

    # Data settings
    data_dir: Path = Field(default=DEFAULT_DATA_DIR)

    # Logging settings
    log_level: str = Field(default="INFO")
    log_to_file: bool = Field(default=False)
    log_dir: Path | None = Field(default=None)  # Defaults to data_dir/logs
    log_retention_days: int = Field(default=30)

    @property
    def logs_path(self) -> Path:
        """Get the logs directory path."""
        if self.log_dir:
            return self.log_dir
        return self.data_dir / "logs"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def setup_logging(settings: Settings | None = None) -> None:
    """Send logs to stderr, and to daily rotated files when enabled."""
    settings = settings or get_settings()

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level, format=CONSOLE_LOG_FORMAT)

    if not settings.log_to_file:
        return

    log_path = settings.logs_path
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path / "rebalancer_{time:YYYY-MM-DD}.log",
        level=settings.log_level,
        format=FILE_LOG_FORMAT,
        rotation="00:00",
        retention=f"{settings.log_retention_days} days",
        compression="gz",
    )
    logger.info(f"Logging to {log_path}")
