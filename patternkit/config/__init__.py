"""Configuration package - schemas, loading and management."""

from .schemas import AppConfig, CommandConfig, LoggingConfig, MediatorConfig, ObserverConfig, OutputConfig

__all__ = [
    "AppConfig",
    "CommandConfig",
    "LoggingConfig",
    "MediatorConfig",
    "ObserverConfig",
    "OutputConfig",
]
