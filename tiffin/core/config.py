"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Local SQLite database, development token secret accepted
    - STAGING: Pre-production database, real secrets expected
    - PRODUCTION: Live environment, real secrets required

Usage:
    from tiffin.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        ...

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEV_JWT_SECRET = "mummatiffin_dev_secret_change_me"


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with the bundled SQLite database
        PRODUCTION: Live environment
        STAGING: Pre-production testing
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Secrets (JWT_SECRET, default admin passwords) should NEVER be committed
    to version control.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Mumma Tiffin",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3000,
        description="API server port"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./mumma.db",
        description="SQLAlchemy async URL (sqlite+aiosqlite or postgresql+psycopg)"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    # ==========================================================================
    # SESSION TOKENS
    # ==========================================================================

    jwt_secret: str = Field(
        default=DEV_JWT_SECRET,
        description="Shared secret used to sign session tokens"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    token_ttl_days: int = Field(
        default=7,
        ge=1,
        description="Session token validity window in days"
    )

    # ==========================================================================
    # PASSWORD HASHING
    # ==========================================================================

    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=16,
        description="bcrypt cost factor"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    notification_limit: int = Field(
        default=50,
        ge=1,
        description="Default number of notifications returned by the public feed"
    )
    address_limit: int = Field(
        default=10,
        ge=1,
        description="Number of saved addresses returned per user"
    )
    strict_snapshot_visibility: bool = Field(
        default=False,
        description=(
            "Show orders whose snapshot cannot be parsed only to administrators "
            "scoped to 'All' instead of to every administrator"
        )
    )
    expose_internal_errors: bool = Field(
        default=True,
        description="Return the raw failure description on 500 responses"
    )

    # ==========================================================================
    # SEED DATA
    # ==========================================================================

    seed_defaults: bool = Field(
        default=True,
        description="Create default admins, sample menu and welcome notification"
    )
    default_admin_email: str = Field(default="admin@mummatiffin.com")
    default_admin_password: str = Field(default="admin123")
    default_manager_email: str = Field(default="manager@mummatiffin.com")
    default_manager_password: str = Field(default="manager123")
    default_manager_city: str = Field(default="Delhi")

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required non-development settings are configured.

        Returns:
            List of offending configuration keys (empty if all present)
        """
        missing = []

        if not self.is_development:
            if self.jwt_secret == DEV_JWT_SECRET:
                missing.append("JWT_SECRET")
            if self.seed_defaults and self.default_admin_password == "admin123":
                missing.append("DEFAULT_ADMIN_PASSWORD")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    return logging.getLogger("tiffin")
