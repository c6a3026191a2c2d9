"""Configuration Management - Environment-Specific Settings.

Provides environment-aware configuration with validation. Values load from
environment variables prefixed ``DICOM_ORGANIZER_`` (nested with ``__``,
e.g. ``DICOM_ORGANIZER_PROCESSING__MAX_ENTRY_SIZE_MB=64``) and an optional
``.env`` file.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ProcessingConfig(BaseModel):
    """Archive processing limits.

    Entries over these limits are skipped like any other unreadable entry;
    they never fail the batch.
    """

    max_entry_size_mb: int = Field(
        default=256,
        ge=1,
        le=4096,
        description="Maximum uncompressed size of one archive entry in MB",
    )
    max_entries: int = Field(
        default=100_000, ge=1, description="Maximum archive entries processed per run"
    )

    @property
    def max_entry_size_bytes(self) -> int:
        return self.max_entry_size_mb * 1024 * 1024


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: str = Field(
        default="console", description="Log format: json or console"
    )
    log_file: Path | None = Field(default=None, description="Optional log file")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Normalize and validate the log format."""
        v = v.lower()
        if v not in {"json", "console"}:
            raise ValueError(f"log_format must be 'json' or 'console', got {v!r}")
        return v


class Settings(BaseSettings):
    """Main application settings.

    Usage:
        from dicom_organizer.core.config import get_settings
        settings = get_settings()
    """

    model_config = SettingsConfigDict(
        env_prefix="DICOM_ORGANIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="DICOM-Organizer", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Current environment"
    )

    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate and normalize environment."""
        if isinstance(v, str):
            v = v.lower()
        return v

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @model_validator(mode="after")
    def apply_environment_defaults(self) -> "Settings":
        """Use JSON logs in production unless a log format was set explicitly."""
        if self.is_production() and "log_format" not in self.logging.model_fields_set:
            self.logging.log_format = "json"
        return self

    def get_summary(self) -> str:
        """Get configuration summary."""
        return f"""
DICOM-Organizer Configuration
=============================
Environment: {self.environment.value}

Processing:
  - Max Entry Size: {self.processing.max_entry_size_mb} MB
  - Max Entries: {self.processing.max_entries}

Logging:
  - Level: {self.logging.log_level.value}
  - Format: {self.logging.log_format}
  - File: {self.logging.log_file or "-"}
"""


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings(force_reload: bool = False) -> Settings:
    """Get application settings (singleton).

    Args:
        force_reload: Force reload settings from environment

    Returns:
        Settings instance

    """
    global _settings
    if _settings is None or force_reload:
        _settings = Settings()
    return _settings
