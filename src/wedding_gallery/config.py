"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_key: str
    photos_dir: Path = Path("var/photos")
    thumbnails_dir: Path = Path("var/thumbnails")
    data_dir: Path = Path("var/data")
    frames_dir: Path = Path("var/frames")
    server_frame_filename: str = "wedding-frame.png"
    server_frame_scale: float = 0.85
    server_frame_quality: int = 90
    thumbnail_width: int = 300
    thumbnail_height: int = 200
    thumbnail_quality: int = 80
    max_upload_bytes: int = 10 * 1024 * 1024
    image_cache_capacity: int = 32
    http_timeout_seconds: float = 15.0
    analytics_base_url: str = "http://localhost:8000"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    downloads_dir: Path = Path("var/downloads")
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def supabase_enabled(self) -> bool:
        """Return true when both Supabase credentials are configured."""
        return bool(self.supabase_url and self.supabase_service_key)


def ensure_directories(settings: Settings) -> None:
    """Create the storage directories the server writes into."""
    for directory in (
        settings.photos_dir,
        settings.thumbnails_dir,
        settings.data_dir,
        settings.frames_dir,
    ):
        directory.mkdir(parents=True, exist_ok=True)
