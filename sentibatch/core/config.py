"""Runtime settings for the sentiment backfill."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://tradestie.com/api/v1/apps/reddit"


class BackfillSettings(BaseSettings):
    """Settings read from ``SENTI_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="SENTI_", extra="ignore")

    api_base_url: str = Field(default=DEFAULT_API_BASE_URL)
    sink: Literal["console", "file"] = Field(default="file")
    log_path: Path = Field(default=Path("results/reddit_sentiment.txt"))
    rate_limit: int = Field(default=60, gt=0)
    rate_window_sec: float = Field(default=60.0, gt=0)
    default_retry_after_sec: float = Field(default=60.0, ge=0)
    max_retries: Optional[int] = Field(default=None, ge=0)
    request_timeout_sec: float = Field(default=30.0, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _strip_base_url(cls, value: object) -> object:
        if isinstance(value, str):
            candidate = value.strip().rstrip("/")
            if not candidate:
                raise ValueError("api_base_url must not be empty")
            return candidate
        return value

    @field_validator("sink", mode="before")
    @classmethod
    def _normalise_sink(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache(maxsize=1)
def get_settings() -> BackfillSettings:
    """Return process-wide settings, constructed on first use."""

    return BackfillSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""

    get_settings.cache_clear()


__all__ = ["BackfillSettings", "DEFAULT_API_BASE_URL", "get_settings", "reset_settings"]
