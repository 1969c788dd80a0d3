"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from hydration_tracker.adapters.tips_client import DEFAULT_TIPS_URL

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    tips_url: str = DEFAULT_TIPS_URL
    tips_timeout_seconds: float = 15.0
    state_grace_seconds: float = 5.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
