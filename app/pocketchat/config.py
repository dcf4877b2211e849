"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_APP_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Runtime settings loaded from POCKETCHAT_* environment variables."""

    app_title: str = "Talk to GPT 4.1"
    provider_label: str = "GPT 4.1"
    history_path: Path = Path.home() / ".pocketchat" / "chatHistory.json"
    reply_delay_seconds: float = 0.5
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="POCKETCHAT_",
        env_file=str(_APP_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
