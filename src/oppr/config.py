"""
Runtime settings for the OPPR engine.

Uses Pydantic Settings to load configuration from environment variables
(prefixed with ``OPPR_``) or a ``.env`` file. These settings cover the
ambient concerns around the engine (logging, default rating system, where
to find constant overrides). The scoring constants themselves live in
``oppr.engine.constants`` and are overridden through the config store.

Usage:
    from oppr.config import settings
    print(settings.log_level)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly (``OPPR_LOG_LEVEL=DEBUG``)
    or via a .env file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="OPPR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Rating Configuration
    # ==========================================================================

    default_rating_system: str = Field(
        default="glicko",
        description="Rating system id read from Player.ratings for TVA and Glicko updates",
    )

    # ==========================================================================
    # Constant Overrides
    # ==========================================================================

    config_overrides_path: Optional[str] = Field(
        default=None,
        description=(
            "Optional JSON file with partial constant overrides, e.g. "
            '{"BASE_VALUE": {"POINTS_PER_PLAYER": 1.0}}. Applied by the scripts.'
        ),
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("default_rating_system")
    @classmethod
    def validate_rating_system(cls, v: str) -> str:
        """Rating system ids are matched case-sensitively, but never blank."""
        if not v.strip():
            raise ValueError("default_rating_system cannot be blank")
        return v.strip()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
