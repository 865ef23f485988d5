"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "StairProperty CRM"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"

    # Database
    database_url: str

    # Firebase Auth
    firebase_project_id: str
    firebase_web_api_key: str
    google_application_credentials: Optional[str] = None

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Cookies
    session_cookie_days: int = 5
    organisation_cookie_max_age: int = 60 * 60 * 24 * 30

    @property
    def cookie_secure(self) -> bool:
        """Cookies are only marked Secure outside debug mode."""
        return not self.debug

    @property
    def origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
