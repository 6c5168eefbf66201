"""Logging configuration schema."""
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogDestination(str, Enum):
    """Log destination enumeration."""
    FILE = "file"
    CONSOLE = "console"
    BOTH = "both"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("WARNING", description="Root log level")
    destination: LogDestination = Field(
        LogDestination.CONSOLE, description="Where log records are written"
    )
    file_path: str = Field("logs/patternkit.log", description="Log file path")
    max_size_mb: int = Field(10, description="Maximum log file size before rotation")
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    format: str = Field(
        "%(asctime)s - %(levelname)s - %(name)s [%(caller_info)s] - %(message)s",
        description="stdlib formatter string",
    )
    renderer: str = Field("keyvalue", description="structlog renderer: keyvalue, json or console")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("renderer")
    @classmethod
    def validate_renderer(cls, v: str) -> str:
        """Validate renderer name."""
        valid_renderers = ["keyvalue", "json", "console"]
        if v not in valid_renderers:
            raise ValueError(f"Renderer must be one of {valid_renderers}")
        return v

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate rotation settings."""
        if v < 0:
            raise ValueError("Rotation settings must not be negative")
        return v
