"""
Runtime Environment Validation Module

Validates all required environment variables at application startup.
If validation fails, the application refuses to start (exit code 1).
"""

import logging
import os
import sys
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ProductionSettings(BaseSettings):
    """
    Strict validation schema for the service's environment variables.

    All required fields MUST be present and valid, or the application will not start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # CRITICAL: Database Configuration
    # ========================================================================
    database_url: str  # REQUIRED: PostgreSQL connection string

    # ========================================================================
    # CRITICAL: Firebase Authentication
    # ========================================================================
    firebase_project_id: str  # REQUIRED: Firebase project ID
    firebase_web_api_key: str  # REQUIRED: Identity Toolkit key for password sign-in
    google_application_credentials: Optional[str] = None  # Path to service account JSON

    # ========================================================================
    # Application Configuration
    # ========================================================================
    app_name: str = "StairProperty CRM"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"

    # ========================================================================
    # CRITICAL: CORS Configuration
    # ========================================================================
    allowed_origins: str  # REQUIRED: Comma-separated list of allowed origins


def _fail(message: str) -> None:
    logger.critical(message)
    print(f"FATAL: {message}", file=sys.stderr)
    sys.exit(1)


def validate_environment() -> ProductionSettings:
    """
    Validate all required environment variables at startup.

    Returns:
        ProductionSettings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = ProductionSettings()
    except ValidationError as e:
        lines = []
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            lines.append(f"{field}: {error['msg']}")
        _fail("Environment validation failed: " + "; ".join(lines))

    # 1. CORS: wildcard is not allowed outside debug
    if not settings.debug:
        origins = [o.strip() for o in settings.allowed_origins.split(",")]
        if "*" in origins:
            _fail("Wildcard CORS origin (*) detected in production mode. Set ALLOWED_ORIGINS to specific domains.")

    # 2. Firebase: credentials path must exist (if provided)
    if settings.google_application_credentials:
        if not os.path.exists(settings.google_application_credentials):
            _fail(f"Firebase credentials file not found: {settings.google_application_credentials}")

    # 3. Database URL: PostgreSQL outside debug
    if not settings.debug and not settings.database_url.startswith("postgresql"):
        _fail("DATABASE_URL must be a PostgreSQL connection string (postgresql+asyncpg://)")

    logger.info(
        "Environment validation passed (app=%s, debug=%s, origins=%s)",
        settings.app_name,
        settings.debug,
        settings.allowed_origins,
    )
    return settings


if __name__ == "__main__":
    validate_environment()
    print("All environment variables are valid!")
