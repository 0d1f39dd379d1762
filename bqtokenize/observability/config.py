"""Configuration for logging."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format (json or text)")
    enable_correlation: bool = Field(default=True, description="Enable correlation IDs")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LEVELS:
            raise ValueError(f"Log level must be one of: {sorted(VALID_LEVELS)}")
        return level

    @field_validator("format")
    @classmethod
    def _validate_format(cls, value: str) -> str:
        log_format = value.strip().lower()
        if log_format not in {"json", "text"}:
            raise ValueError("Log format must be 'json' or 'text'")
        return log_format
