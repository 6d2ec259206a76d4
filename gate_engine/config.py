"""Application settings — loaded once from .env, cached for the process lifetime."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    timezone: str = "Europe/London"   # display only, engine works in UTC
    airport_iata: str = "LHR"

    api_host: str = "0.0.0.0"
    api_port: int = 50051

    turnaround_buffer_minutes: int = 15
    classification_cache_size: int = 256

    # Ops bot is started only when both are set
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    stats_interval_hours: int = 0   # 0 = disable scheduled stats

    @property
    def bot_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO") -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
