"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_anon_key: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    functions_base_url: str | None = None
    functions_timeout_seconds: float = 120.0
    public_base_url: str = "http://localhost:8000"
    session_cookie_name: str = "familysync_session"
    session_cookie_secure: bool = False
    session_cache_ttl_seconds: int = 300
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_functions_url(settings: Settings) -> str:
    """Return the base URL that serverless functions are invoked under."""
    raw = settings.functions_base_url
    if raw is None or not raw.strip():
        return f"{settings.supabase_url.rstrip('/')}/functions/v1"
    return raw.strip().rstrip("/")
