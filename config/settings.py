"""
Application Configuration Module

Centralizes all application settings using Pydantic Settings.
Environment variables are loaded from .env file automatically.

Usage:
    from config.settings import settings

    print(settings.DATABASE_URL)
    print(settings.MIN_AI_CONFIDENCE)
"""

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Variable names are case-insensitive.
    """

    # ==========================================================================
    # Database Configuration
    # ==========================================================================
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./dexai.db",
        description="Database connection string (PostgreSQL in production)"
    )
    DATABASE_ECHO: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )

    # ==========================================================================
    # Authentication & Security
    # ==========================================================================
    SECRET_KEY: str = Field(
        default="your_super_secret_key_change_this_in_production",
        description="JWT signing secret key"
    )
    ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24,
        description="JWT token expiration time in minutes"
    )

    # ==========================================================================
    # AI Word Analysis
    # ==========================================================================
    GOOGLE_API_KEY: Optional[str] = Field(
        default=None,
        description="Google Gemini API key for word analysis"
    )
    GEMINI_MODEL: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model used to generate dictionary entries"
    )
    AI_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Upper bound for a single word analysis call"
    )
    AI_VERSION: str = Field(
        default="gemini-1.5-flash",
        description="Version tag stamped on AI-generated entries"
    )

    # ==========================================================================
    # Redis Configuration (for shared quota counters)
    # ==========================================================================
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection URL for rate limiting across instances"
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> list:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit logs as JSON lines"
    )
    ENVIRONMENT: str = Field(
        default="production",
        description="Deployment environment (development, staging, production)"
    )
    APP_NAME: str = Field(
        default="DexAI",
        description="Application name for OpenAPI docs"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    @property
    def is_development(self) -> bool:
        """Whether development-only operations (regeneration) are allowed."""
        return self.ENVIRONMENT.lower() == "development"

    # ==========================================================================
    # Discovery Policy
    # ==========================================================================
    REQUIRE_AUTH_FOR_DISCOVERY: bool = Field(
        default=False,
        description="Only authenticated users may trigger AI discovery"
    )
    MIN_AI_CONFIDENCE: float = Field(
        default=0.7,
        description="Minimum AI confidence for a new dictionary entry"
    )
    MAX_DAILY_DISCOVERIES: int = Field(
        default=50,
        description="Ledger-derived discovery quota per user per day"
    )
    AI_DAILY_LIMIT: int = Field(
        default=50,
        description="AI generations per user per day (in-memory quota)"
    )
    ANON_DISCOVERY_PER_HOUR: int = Field(
        default=10,
        description="AI generations per anonymous IP per hour"
    )
    BURST_MAX_DISCOVERIES: int = Field(
        default=5,
        description="Discoveries allowed inside the burst window"
    )
    BURST_WINDOW_SECONDS: int = Field(
        default=60,
        description="Trailing window for burst detection"
    )

    # ==========================================================================
    # Community Consensus
    # ==========================================================================
    CONSENSUS_MIN_VALIDATIONS: int = Field(
        default=5,
        description="Validations needed for community verification"
    )
    CONSENSUS_MAX_ERRORS: int = Field(
        default=3,
        description="Error reports that block community verification"
    )

    # ==========================================================================
    # Endpoint Rate Limits
    # ==========================================================================
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Enable per-IP request limits (slowapi)"
    )
    VOTE_RATE_LIMIT: int = Field(default=20, description="Votes per window per user")
    VOTE_RATE_WINDOW_SECONDS: int = Field(default=60)
    FLAG_RATE_LIMIT: int = Field(default=5, description="Flags per window per user")
    FLAG_RATE_WINDOW_SECONDS: int = Field(default=3600)
    CONTRIBUTION_RATE_LIMIT: int = Field(default=30, description="Contributions per window per user")
    CONTRIBUTION_RATE_WINDOW_SECONDS: int = Field(default=60)
    RATE_LIMIT_SWEEP_INTERVAL_SECONDS: int = Field(
        default=3600,
        description="How often expired quota entries are evicted"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Singleton instance for easy import
settings = get_settings()
