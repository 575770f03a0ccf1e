# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.DB_TYPE)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Database Selection
    # -------------------------------------------------------------------------
    # "auto" walks the priority chain: Postgres -> MySQL -> in-memory

    DB_TYPE: Literal["auto", "postgres", "mysql", "memory"] = Field(
        default="auto",
        description="Storage backend to use, or 'auto' to pick the first configured one"
    )

    DATABASE_URL: str | None = Field(
        default=None,
        description="PostgreSQL connection URL (presence marks Postgres as configured)"
    )

    # -------------------------------------------------------------------------
    # MySQL Configuration
    # -------------------------------------------------------------------------

    MYSQL_HOST: str = Field(default="localhost", description="MySQL server host")

    MYSQL_PORT: int = Field(default=3306, ge=1, le=65535, description="MySQL server port")

    MYSQL_USER: str = Field(default="root", description="MySQL user")

    MYSQL_PASSWORD: str = Field(default="", description="MySQL password")

    MYSQL_DATABASE: str | None = Field(
        default=None,
        description="MySQL database name (presence marks MySQL as configured)"
    )

    DB_CONNECT_TIMEOUT: int = Field(
        default=3,
        ge=1,
        le=60,
        description="Seconds to wait when probing a database for availability"
    )

    SEED_DEFAULT_CATEGORIES: bool = Field(
        default=True,
        description="Create the default categories when the category table is empty"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(default="0.0.0.0", description="Host to bind the API server to")

    API_PORT: int = Field(default=5000, ge=1, le=65535, description="Port for the API server")

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing access tokens"
    )

    JWT_ALGORITHM: str = Field(default="HS256", description="Signing algorithm for access tokens")

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24 * 7,
        ge=1,
        description="Access token lifetime in minutes (one week by default)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Checkout Settings
    # -------------------------------------------------------------------------

    ESTIMATED_DELIVERY_DAYS: int = Field(
        default=7,
        ge=0,
        le=90,
        description="Days added to the order date for a new shipment's estimated delivery"
    )

    DEFAULT_PAYMENT_METHOD: str = Field(
        default="credit_card",
        description="Payment method recorded when checkout does not name one"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://shop.example.com"
            -> ["http://localhost:5173", "https://shop.example.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def postgres_configured(self) -> bool:
        return bool(self.DATABASE_URL)

    @property
    def mysql_configured(self) -> bool:
        return bool(self.MYSQL_DATABASE)

    @property
    def postgres_url(self) -> str | None:
        """
        DATABASE_URL rewritten for the psycopg driver.

        Example: "postgres://u:p@db/shop" -> "postgresql+psycopg://u:p@db/shop"
        """
        if not self.DATABASE_URL:
            return None
        url = self.DATABASE_URL.strip()
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url

    @property
    def mysql_url(self) -> str:
        """Build the PyMySQL connection URL from the MYSQL_* settings."""
        password = quote_plus(self.MYSQL_PASSWORD)
        credentials = f"{self.MYSQL_USER}:{password}" if password else self.MYSQL_USER
        database = self.MYSQL_DATABASE or "ecommerce"
        return f"mysql+pymysql://{credentials}@{self.MYSQL_HOST}:{self.MYSQL_PORT}/{database}"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
