"""Unified configuration management for the application."""
import threading
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from patternkit.config.loader import ConfigurationLoader
from patternkit.config.schemas import AppConfig
from patternkit.domain.exceptions import ConfigurationError
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class ConfigurationManager:
    """
    Single source of truth for application configuration.

    Configuration is loaded lazily on first access from, in order:
    the explicit file (if given) or the default locations, then
    ``PATTERNKIT_*`` environment overrides. The result is validated
    against :class:`AppConfig`.
    """

    def __init__(self, config_file: Optional[str] = None, loader: Optional[ConfigurationLoader] = None):
        """Initialize configuration manager with lazy loading."""
        self._config_file = config_file
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None
        self._loader = loader

    @property
    def loader(self) -> ConfigurationLoader:
        """Lazy load configuration loader."""
        if self._loader is None:
            self._loader = ConfigurationLoader()
        return self._loader

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def _load_app_config(self) -> AppConfig:
        """Load application configuration from sources."""
        if self._config_file:
            config_data = self.loader.load_from_file(self._config_file)
        else:
            config_data = self.loader.load_configuration()

        config_data = self.loader.apply_environment_overrides(config_data)

        try:
            app_config = AppConfig.from_dict(config_data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        logger.debug("Configuration loaded", source=self._config_file or "defaults")
        return app_config

    def get(self, section: str) -> Any:
        """Get a top-level configuration section by name."""
        if section not in AppConfig.model_fields:
            raise ConfigurationError(f"Unknown configuration section: {section}")
        return getattr(self.app_config, section)

    def reload(self) -> AppConfig:
        """Discard the cached configuration and load it again."""
        with self._lock:
            self._app_config = None
        return self.app_config
