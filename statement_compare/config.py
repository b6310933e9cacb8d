# statement_compare/config.py

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Statement Compare API"
    app_env: str = "development"
    debug: bool = True
    frontend_url: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Anthropic (Claude)
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    mapping_max_tokens: int = 8000
    reconcile_max_tokens: int = 4000

    # Payload bounds
    mapping_sample_rows: int = 5
    reconcile_max_rows: int = 50
    preview_rows: int = 5

    # Sessions
    session_ttl_minutes: int = 60

    # Uploads
    max_upload_mb: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
