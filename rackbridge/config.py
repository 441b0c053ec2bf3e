"""Configuration loading for the rack bridge.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rackbridge.core.models import DEFAULT_RACK_CONFIG_PATH, RackServletConfig


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Rack application
    rack_config_path: str = Field(
        default=DEFAULT_RACK_CONFIG_PATH,
        description="Path to the rackup script that builds the WSGI application",
    )

    # HTTP host
    http_host: str = Field(
        default="0.0.0.0",
        description="Host to listen on for the HTTP server",
    )
    http_port: int = Field(
        default=8080,
        description="Port to listen on for the HTTP server",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("rack_config_path")
    @classmethod
    def validate_rack_config_path(cls, v: str) -> str:
        """Ensure a rackup script path is given."""
        if not v.strip():
            raise ValueError("rack_config_path must be a non-empty string")
        return v

    @field_validator("http_port")
    @classmethod
    def validate_http_port(cls, v: int) -> int:
        """Ensure HTTP port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("http_port must be between 1 and 65535")
        return v

    def servlet_config(self) -> RackServletConfig:
        """Build the servlet configuration from these settings."""
        return RackServletConfig(rack_config_path=self.rack_config_path)


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
