"""Main application configuration schema."""
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from .logging_schema import LoggingConfig
from .patterns_schema import CommandConfig, MediatorConfig, ObserverConfig

OUTPUT_FORMATS = ["json", "yaml", "table", "list"]


class OutputConfig(BaseModel):
    """CLI output configuration."""

    format: str = Field("json", description="Default output format")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate output format."""
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Output format must be one of {OUTPUT_FORMATS}")
        return v


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
    observer: ObserverConfig = Field(default_factory=lambda: ObserverConfig())
    command: CommandConfig = Field(default_factory=lambda: CommandConfig())
    mediator: MediatorConfig = Field(default_factory=lambda: MediatorConfig())
    output: OutputConfig = Field(default_factory=lambda: OutputConfig())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


def validate_config(data: Dict[str, Any]) -> AppConfig:
    """Validate raw configuration data and return the typed config."""
    return AppConfig.from_dict(data)
