"""
Configuration management for the Availability Engine.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Python & Application
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Storage
    storage_backend: Literal["memory", "database"] = Field(
        default="memory",
        description="Key-value store backing availability records"
    )
    database_url: str = Field(
        default="sqlite:///./data/availability.db",
        description="Database connection URL (used when storage_backend=database)"
    )
    availability_key_prefix: str = Field(
        default="availability-",
        description="Key prefix for per-user availability records"
    )

    # Availability defaults
    default_start_time: str = Field(
        default="09:00",
        description="Default daily start time (HH:MM) for new records"
    )
    default_end_time: str = Field(
        default="17:00",
        description="Default daily end time (HH:MM) for new records"
    )

    # Safety limits
    max_range_days: int = Field(
        default=1096,
        ge=1,
        description="Largest inclusive date range accepted by a range update"
    )
    max_recurrence_instances: int = Field(
        default=500,
        ge=1,
        description="Maximum occurrences generated when expanding a recurrence"
    )

    # Meetings
    send_meeting_notifications: bool = Field(
        default=True,
        description="Deliver invitations to invitees when a meeting is scheduled"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )
    api_reload: bool = Field(
        default=True,
        description="Enable auto-reload in development"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("default_start_time", "default_end_time")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        parts = v.split(":")
        if (
            len(parts) != 2
            or not all(p.isdigit() and len(p) == 2 for p in parts)
            or int(parts[0]) > 23
            or int(parts[1]) > 59
        ):
            raise ValueError(f"Expected HH:MM time, got '{v}'")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.python_env == "production"

    @property
    def uses_database(self) -> bool:
        """Check if availability records are stored in the database."""
        return self.storage_backend == "database"

    def validate_production_config(self) -> None:
        """
        Validate configuration for production environment.

        Raises:
            ValueError: If required production settings are missing or invalid
        """
        if not self.is_production:
            return

        errors = []

        # In-memory records vanish on restart
        if not self.uses_database:
            errors.append(
                "Production requires STORAGE_BACKEND=database."
            )

        if self.default_start_time >= self.default_end_time:
            errors.append(
                "DEFAULT_START_TIME must be earlier than DEFAULT_END_TIME."
            )

        if errors:
            raise ValueError("Production configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure we only load settings once.
    Use this function throughout the application to access settings.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from availability_engine.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.storage_backend)
    """
    return Settings()
