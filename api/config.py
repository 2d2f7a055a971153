"""
API configuration settings.
"""

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Reading List API"
    api_version: str = "1.0.0"
    api_description: str = "In-memory reading list with filtering, ratings and statistics"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # CORS Settings
    cors_origins: list = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore"
    }


# Global config instance
config = APIConfig()
