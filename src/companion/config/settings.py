"""
Companion Application Settings

Configuration management using Pydantic Settings.
All values are loaded from environment variables with the
COMPANION_ prefix (or a local .env file).

Reference data locations (crisis phrases, crisis resources,
intervention catalog) are configured here so they can be
extended without code changes.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionSettings(BaseSettings):
    """Session engine tuning."""

    model_config = SettingsConfigDict(env_prefix="COMPANION_SESSION_")

    cooldown_turns: int = Field(
        default=3,
        ge=0,
        le=50,
        description="Turns before an intervention may be offered again",
    )
    focus_history_window: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Recent focus areas considered when choosing the next focus",
    )
    baseline_jitter: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Maximum day-to-day variance applied to the baseline overall score",
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for every session's random source (None = unseeded)",
    )
    completed_session_limit: int = Field(
        default=1000,
        ge=0,
        description="Ended sessions whose final status stays available for lookups",
    )


class SafetySettings(BaseSettings):
    """Safety screening configuration."""

    model_config = SettingsConfigDict(env_prefix="COMPANION_SAFETY_")

    phrases_path: Optional[str] = Field(
        default=None,
        description="JSON file extending the built-in crisis phrase lists",
    )
    resources_path: Optional[str] = Field(
        default=None,
        description="JSON file overriding crisis resources per jurisdiction",
    )
    country_code: str = Field(
        default="US",
        min_length=2,
        max_length=4,
        description="Jurisdiction used to resolve crisis resources",
    )


class CatalogSettings(BaseSettings):
    """Intervention catalog configuration."""

    model_config = SettingsConfigDict(env_prefix="COMPANION_CATALOG_")

    path: Optional[str] = Field(
        default=None,
        description="JSON file replacing the built-in intervention catalog",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Usage:
        settings = get_settings()
        window = settings.session.focus_history_window
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPANION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    api_version: str = Field(default="v1", description="API version prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # Nested settings
    session: SessionSettings = Field(default_factory=SessionSettings)
    safety: SafetySettings = Field(default_factory=SafetySettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    For testing, construct Settings directly and inject it.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
