"""
Application Settings
===================

Rendering defaults and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="pixeltree", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=False, description="Also write rotating log files")
    storage_path: Path = Field(default=Path("./storage"), description="Storage directory path")

    # Canvas Configuration (logical units)
    default_width: int = Field(default=800, description="Default canvas width")
    default_height: int = Field(default=600, description="Default canvas height")
    max_width: int = Field(default=4000, description="Maximum canvas width")
    max_height: int = Field(default=4000, description="Maximum canvas height")

    # Scale Configuration
    default_scale_factor: float = Field(default=1.0, gt=0, description="Default output scale factor")
    max_scale_factor: float = Field(default=4.0, gt=0, description="Maximum output scale factor")

    # Resource Configuration
    asset_root: Optional[Path] = Field(
        default=None, description="Base directory for relative resource references"
    )
    preload_concurrency: int = Field(
        default=8, gt=0, description="Maximum concurrent resource loads before drawing"
    )

    # Text Configuration
    default_font_family: str = Field(
        default="default", description="Font file path, or 'default' for the built-in font"
    )
    default_font_size: float = Field(default=16.0, gt=0, description="Default font size")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("asset_root")
    @classmethod
    def expand_asset_root(cls, v: Optional[Path]) -> Optional[Path]:
        """Expand a leading ~ in the asset root."""
        if v is None:
            return v
        return v.expanduser()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="PIXELTREE_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
