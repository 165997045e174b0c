"""
Configuration Management for the Budget Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable constants live here.
The accounting rules themselves (category keys, the 95%/100% status bands)
are fixed in code; only operational knobs are configurable.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StreakSettings(BaseSettings):
    """Streak tracking configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STREAK_",
        extra="ignore"
    )

    daily_budget_divisor: int = Field(
        default=30,
        ge=1,
        le=31,
        description="Fixed number of days the monthly income is split across"
    )

    # Storage retry policy for the check-and-update sequence
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts for a streak check before failing"
    )
    retry_min_wait: float = Field(
        default=0.1,
        ge=0.0,
        description="Minimum backoff between attempts, in seconds"
    )
    retry_max_wait: float = Field(
        default=2.0,
        ge=0.0,
        description="Maximum backoff between attempts, in seconds"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (forces DEBUG log output)"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for engine log output"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def streak(self) -> StreakSettings:
        return StreakSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
