"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with type validation.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "content-rest-api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "content_api"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60 * 7
    ALGORITHM: str = "HS256"

    # Roles and permissions
    PERMISSIONS_CONTENT_TYPE: str = "RestPermissions"
    DEFAULT_USER_ROLE: str = "Customer"
    ADMIN_ROLE: str = "Administrator"

    # Live updates (server-sent events)
    LIVE_UPDATES_ENABLED: bool = True
    SSE_POLL_INTERVAL_SECONDS: float = 3.0
    SSE_HEARTBEAT_INTERVAL_SECONDS: float = 20.0
    SSE_QUEUE_SIZE: int = 100

    # CORS
    CORS_ORIGINS: Annotated[list[str], NoDecode, Field(default_factory=list)]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string or comma-separated
            if v.startswith("["):
                import json

                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("DEBUG", "LIVE_UPDATES_ENABLED", mode="before")
    @classmethod
    def parse_bool(cls, v: str | bool) -> bool:
        """Parse boolean flags from string or bool."""
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
