"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Nothing here is secret: the portal holds no credentials of its
own, it only relays the caller's bearer token to the upstream backend.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from account_portal.config import settings
    print(settings.UPSTREAM_BASE_URL)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Account Portal."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Account Portal"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # --- Upstream backend ---
    # The authenticated service that owns account and customer data
    UPSTREAM_BASE_URL: str = "http://localhost:8080"
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0
    # Login endpoint advertised in the OpenAPI security scheme
    UPSTREAM_TOKEN_URL: str = "/api/auth/login"

    # --- Validation ---
    # The country code rule is defined but not applied to updates unless enabled
    ENFORCE_COUNTRY_CODE: bool = False

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"  # "standard" or "json"

    # --- CORS ---
    # Origins allowed to make cross-origin requests (frontend URLs)
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
