"""Configuration schemas package."""

from .app_schema import OUTPUT_FORMATS, AppConfig, OutputConfig, validate_config
from .logging_schema import LogDestination, LoggingConfig
from .patterns_schema import CommandConfig, MediatorConfig, ObserverConfig

__all__ = [
    "OUTPUT_FORMATS",
    "AppConfig",
    "OutputConfig",
    "validate_config",
    "LogDestination",
    "LoggingConfig",
    "CommandConfig",
    "MediatorConfig",
    "ObserverConfig",
]
