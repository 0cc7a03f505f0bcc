"""Configuration management for cursor pagination."""

import logging
from typing import Optional
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pagination settings with environment variable support.

    Every field can be set through a ``CURSOR_PAGINATION_`` prefixed
    environment variable or a ``.env`` file.
    """

    # Cursor settings
    cursor_secret: Optional[SecretStr] = None
    cursor_generation_concurrency: int = Field(default=10, ge=1)

    # Pagination settings
    max_nodes: int = Field(default=100, ge=1)

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("cursor_secret")
    @classmethod
    def validate_cursor_secret(cls, v):
        """Validate cursor secret length."""
        if v is not None and len(v.get_secret_value()) < 30:
            raise ValueError("Cursor secret must be at least 30 characters")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    model_config = {
        "env_prefix": "CURSOR_PAGINATION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": True,
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get pagination settings."""
    return settings


def configure_logging(config: Optional[Settings] = None) -> None:
    """Configure root logging from settings.

    The library itself never calls this; it is meant for entry points.
    """
    config = config or get_settings()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=config.log_format
    )
