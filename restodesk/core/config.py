"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Seeds the two demo restaurants, verbose errors allowed
    - STAGING: Same runtime as production, used for pre-release checks
    - PRODUCTION: Demo seeding must be requested explicitly

All state lives in an in-memory SQLite database, so there is nothing to
provision: the settings only shape behaviour (time zone for sales days,
shareable link base URL, superadmin bootstrap credentials).

Usage:
    from restodesk.core.config import get_settings

    settings = get_settings()
    print(settings.timezone)

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with seeded demo restaurants
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
    Passwords given here are only used to bootstrap the seeded accounts and
    are hashed before they reach the user store.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the API server
        api_port: Port for the API server
        app_base_url: Base URL used to build shareable restaurant links

        # Storage
        database_url: SQLAlchemy URL of the in-memory store

        # Business Configuration
        timezone: IANA zone whose midnight separates sales days
        walk_in_id: Placing-user id recorded for walk-in orders
        top_customers_limit: Size of the top spenders / most frequent lists
    """

    model_config = SettingsConfigDict(
        env_prefix="RESTODESK_",
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
        default="Restodesk Ordering",
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
        default=8001,
        description="API server port"
    )
    app_base_url: str = Field(
        default="http://localhost:8001",
        description="Base URL for shareable restaurant links"
    )

    # ==========================================================================
    # STORAGE
    # ==========================================================================

    database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="SQLAlchemy URL (in-memory SQLite, state is lost on restart)"
    )

    # ==========================================================================
    # SEED DATA
    # ==========================================================================

    seed_demo_data: Optional[bool] = Field(
        default=None,
        description="Seed the two demo restaurants (defaults to on in development)"
    )
    demo_password: str = Field(
        default="password123",
        description="Password of the seeded demo admins and customers"
    )
    superadmin_username: str = Field(
        default="madisonabigail1103admin",
        description="Username of the seeded superadmin account"
    )
    superadmin_password: str = Field(
        default="change-me-superadmin",
        description="Password of the seeded superadmin account"
    )

    # ==========================================================================
    # SECURITY
    # ==========================================================================

    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor for password hashes"
    )
    session_ttl_minutes: int = Field(
        default=120,
        ge=1,
        description="Idle minutes after which a session token expires"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    timezone: str = Field(
        default="UTC",
        description="Time zone whose calendar days bound daily and weekly sales"
    )
    walk_in_id: str = Field(
        default="walk-in",
        description="Placing-user id recorded for walk-in orders"
    )
    top_customers_limit: int = Field(
        default=3,
        ge=1,
        description="Number of customers in the top spenders / most frequent lists"
    )

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

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject zone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: {v}")
        return v

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
    def is_staging(self) -> bool:
        """Check if running in staging mode."""
        return self.env_mode == EnvironmentMode.STAGING

    @property
    def should_seed(self) -> bool:
        """Seed demo data when asked to, or by default in development."""
        if self.seed_demo_data is None:
            return self.is_development
        return self.seed_demo_data

    @property
    def tzinfo(self) -> ZoneInfo:
        """Zone object for the configured time zone."""
        return ZoneInfo(self.timezone)

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate settings that must not keep their demo defaults outside development.

        Returns:
            List of offending configuration keys (empty if all good)
        """
        problems = []

        if not self.is_development:
            if self.superadmin_password == "change-me-superadmin":
                problems.append("RESTODESK_SUPERADMIN_PASSWORD")
            if self.debug:
                problems.append("RESTODESK_DEBUG")

        return problems


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once,
    ensuring consistency across the application lifecycle.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
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

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-30s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("restodesk")
