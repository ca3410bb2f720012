"""
Configuration for Tag Vault.

Values come from the process environment (or a local ``.env`` file) and are
passed explicitly to ``create_app`` / ``build_services``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage settings
    database_url: str = Field(
        default="sqlite:///./tagvault.db",
        description="SQLAlchemy connection string; SQLite is the tested backend",
    )
    images_dir: Path = Field(
        default=Path("images"), description="Directory for originals and thumbnails"
    )

    # Presentation settings
    templates_dir: Path = Field(
        default=APP_DIR / "templates", description="Jinja template directory"
    )
    static_dir: Path = Field(default=APP_DIR / "static", description="Static assets")

    # Thumbnail settings
    thumbnail_size: int = Field(
        default=100, ge=1, description="Bounding box edge for thumbnails"
    )
    thumbnail_quality: int = Field(
        default=85, ge=1, le=95, description="JPEG quality for thumbnails"
    )

    # Behaviour
    search_case_sensitive: bool = Field(
        default=True, description="Case-sensitive tag substring search"
    )
    reconcile_on_startup: bool = Field(
        default=True, description="Rebuild missing thumbnails when the app starts"
    )

    # Server settings
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=3000, description="Server port")
    log_level: str = Field(default="INFO", description="Log level")


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
