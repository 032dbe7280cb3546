"""
Application settings for Daybook.

Values come from environment variables prefixed with DAYBOOK_ (and an
optional .env file), e.g. DAYBOOK_DATA_DIR=/srv/daybook DAYBOOK_DEBUG=1.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DAYBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Daybook"
    debug: bool = False
    log_level: str | None = None  # Falls back to DEBUG/INFO based on `debug`
    json_logs: bool = False

    # Storage
    data_dir: Path = Path("data")
    tasks_file: str = "personal-tasks.json"
    diary_file: str = "diary-entries.json"

    # Remote blob store. When set, the save pipeline reads and writes the
    # task list over HTTP instead of touching the local file.
    store_url: str | None = None
    store_timeout: float = Field(default=10.0, gt=0)

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Diary: before this hour the previous calendar day is still "today"
    day_rollover_hour: int = Field(default=6, ge=0, le=23)

    @property
    def tasks_path(self) -> Path:
        return self.data_dir / self.tasks_file

    @property
    def diary_path(self) -> Path:
        return self.data_dir / self.diary_file


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
