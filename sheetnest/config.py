"""Configuration management for SheetNest."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NEST_",
        extra="ignore",
    )

    # Nesting defaults (mm / degrees)
    default_kerf_width: float = Field(default=0.0, ge=0, description="Kerf compensation per side in mm")
    default_global_clearance: float = Field(default=5.0, ge=0, description="Minimum gap between parts in mm")
    default_rotation_step: float = Field(default=90.0, gt=0, le=360, description="Rotation increment for free rotation")
    default_position_step: float = Field(default=5.0, gt=0, description="Grid step for position candidates in mm")
    default_time_limit: Optional[float] = Field(default=None, gt=0, description="Abort runs after this many seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the CLI")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Override global settings (``None`` reloads from the environment)."""
    global _settings
    _settings = settings
