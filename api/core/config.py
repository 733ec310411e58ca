"""Application configuration using pydantic-settings."""

from functools import cached_property, lru_cache
from pathlib import Path
from typing import Self

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # JSON array of {"id": ..., "title": ...} records
    # Defaults to public/videos.json under the working directory
    videos_data_path: str = ""

    # Where unknown video ids are sent (302)
    not_found_path: str = "/404"

    # Built static site, mounted at / when present
    # Defaults to dist/ under the working directory
    site_dir: str = ""

    # Start loading the video table in the background at startup
    preload_videos: bool = True

    # Seconds before a single dataset load is abandoned (None = no limit)
    load_timeout_seconds: float | None = None

    debug: bool = False
    enable_docs: bool = False  # Swagger UI at /docs

    @model_validator(mode="after")
    def validate_config(self) -> Self:
        if not self.not_found_path.startswith("/"):
            raise ValueError(
                "NOT_FOUND_PATH must be a site-relative path starting with '/'."
            )
        if self.load_timeout_seconds is not None and self.load_timeout_seconds <= 0:
            raise ValueError("LOAD_TIMEOUT_SECONDS must be greater than zero.")
        return self

    @cached_property
    def videos_data_file(self) -> Path:
        """Defaults to <cwd>/public/videos.json if VIDEOS_DATA_PATH not set."""
        if self.videos_data_path:
            return Path(self.videos_data_path)
        return Path.cwd() / "public" / "videos.json"

    @cached_property
    def site_dir_path(self) -> Path:
        """Defaults to <cwd>/dist if SITE_DIR not set."""
        if self.site_dir:
            return Path(self.site_dir)
        return Path.cwd() / "dist"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("NOT_FOUND_PATH", "/missing")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()
