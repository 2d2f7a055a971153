"""
Configuration management using environment variables.
Handles reading list settings with validation and defaults.
"""

from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class LibraryConfig(BaseSettings):
    """
    Configuration for the reading list core.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Store Configuration
    seed_on_startup: bool = Field(default=True, description="Load the starter books on startup")
    recent_window_days: int = Field(default=30, description="Days counted as recently added")
    timezone: str = Field(default="UTC", description="Timezone for today's date and current year")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    @field_validator('recent_window_days')
    @classmethod
    def validate_recent_window(cls, v):
        """Ensure the recent window is positive."""
        if v < 1:
            raise ValueError('recent_window_days must be at least 1')
        return v

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Ensure timezone is a known IANA name."""
        if v.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f'Unknown timezone: {v}')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = LibraryConfig()
