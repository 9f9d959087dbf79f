"""Application configuration."""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("supabase_url", "next_public_supabase_url"),
    )
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "supabase_anon_key", "next_public_supabase_anon_key", "supabase_key"
        ),
    )
    openai_api_key: str = ""
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    default_language: str = "ru"
    log_level: str = "INFO"
    public_url: str = "http://localhost:8000"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def store_configured(self) -> bool:
        """Return True when both Supabase credentials are present."""
        return bool(self.supabase_url.strip() and self.supabase_anon_key.strip())

    @property
    def advice_configured(self) -> bool:
        """Return True when an OpenAI key is present."""
        return bool(self.openai_api_key.strip())


def oauth_redirect_url(settings: Settings) -> str:
    """Build the OAuth callback URL for the configured public address."""
    return f"{settings.public_url.rstrip('/')}/auth/callback"
