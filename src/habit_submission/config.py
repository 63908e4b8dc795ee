"""Submission client configuration loaded from environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WEBHOOK_URL = "https://neuralmediclookbook-25w87d6g.b4a.run/data/"


class Settings(BaseSettings):
    """Client settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="HABITS_")

    # Webhook receiving every logged event
    webhook_url: str = DEFAULT_WEBHOOK_URL

    # Seconds, httpx's own default
    request_timeout: float = 5.0

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
