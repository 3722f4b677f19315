"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    google_client_id: str | None = None
    storage_bucket: str = "productimages"
    products_table: str = "products"
    site_url: str | None = None
    session_cookie_name: str = "inventory_session"
    session_idle_seconds: int = 1800
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_client_id(raw: str | None) -> str | None:
    """Return the federated client id, treating blank values as unset."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
