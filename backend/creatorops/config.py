"""
Centralized application configuration.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "CreatorOps"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./creatorops.db"

    # JWT Authentication
    jwt_secret_key: str = "change-me-in-production-use-at-least-32-characters"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7

    # CSV bulk import
    import_preview_rows: int = 5
    import_strict_foreign_keys: bool = False  # Reject the batch on unmatched references
    import_per_row_results: bool = False      # Commit each row on its own instead of one batch
    import_max_file_bytes: int = 5 * 1024 * 1024

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
