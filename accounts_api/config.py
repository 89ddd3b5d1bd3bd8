"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Nothing here is secret: the service trusts the X-Customer-ID header
set by an upstream gateway, so there are no signing keys to manage.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from accounts_api.config import settings
    print(settings.DATABASE_URL)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Account Management API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Account Management API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Database ---
    # SQLite for local runs; swap to a PostgreSQL (asyncpg) URL for production
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/accounts.db"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    # "default" or "detailed" (adds file, line and function)
    LOG_FORMAT: str = "default"

    # --- Accounts ---
    DEFAULT_BRANCH_ID: str = "BR001"
    ACCOUNT_NUMBER_LENGTH: int = 10
    # Upper bound on regenerating a colliding account number
    ACCOUNT_NUMBER_MAX_ATTEMPTS: int = 10

    # --- Listing ---
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # --- Demo data ---
    LOAD_SAMPLE_DATA: bool = False

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
