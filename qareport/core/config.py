"""Configuration management for the QA report service."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # Sandboxed environments may not expose .env; rely on real env vars
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Environment
    QA_ENV: str = Field(default="dev", description="Environment: dev, test, staging, prod")

    # Image uploads
    IMAGE_BUCKET: str = Field(default="qa-images", description="Storage bucket for issue images")
    MAX_IMAGE_UPLOAD_BYTES: int = Field(
        default=5 * 1024 * 1024, description="Max issue image size in bytes"
    )

    # Checklist autosave
    SAVE_DEBOUNCE_SECONDS: float = Field(
        default=1.0, description="Quiet period before a debounced checklist write"
    )

    # Sharing
    SHARE_TOKEN_BYTES: int = Field(
        default=24, description="Random bytes behind each share token"
    )
    PUBLIC_APP_URL: str = Field(
        default="http://localhost:3000", description="Base URL used to build share links"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
