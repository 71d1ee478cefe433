"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    firebase_project_id: str
    firebase_database_url: str
    firebase_admin_client_email: str | None = None
    firebase_admin_private_key: str | None = None
    license_key: str
    premium_ai_license_key: str | None = None
    free_diary_limit: int = 14
    free_daily_estimate_credits: int = 2
    premium_daily_estimate_credits: int = 20
    pro_estimate_cost: int = 10
    license_cache_ttl_seconds: int = 300
    cors_allowed_origins: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_emulators(self) -> bool:
        """Return True when the Firebase emulators should be used."""
        has_credentials = bool(
            self.firebase_admin_client_email and self.firebase_admin_private_key
        )
        return self.environment == "local" and not has_credentials


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse the comma separated CORS origins from env."""
    if raw is None:
        return []
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]


def normalize_private_key(raw: str) -> str:
    """Turn escaped newlines from env files back into real ones."""
    return raw.replace("\\n", "\n")
