"""Configuration loading from files and environment variables."""
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from patternkit._package import ENV_PREFIX
from patternkit.config.env_expansion import expand_env_vars
from patternkit.domain.exceptions import ConfigurationError
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_LOCATIONS = [
    Path("patternkit.yaml"),
    Path("patternkit.yml"),
    Path("patternkit.json"),
    Path.home() / ".config" / "patternkit" / "config.yaml",
]

# Nesting separator inside override names, e.g. PATTERNKIT_LOGGING__LEVEL
NESTING_SEPARATOR = "__"


class ConfigurationLoader:
    """Loads raw configuration dictionaries from files and the environment."""

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self.env_prefix = env_prefix

    def load_from_file(self, path: str) -> Dict[str, Any]:
        """
        Load configuration from a YAML or JSON file.

        The format is chosen by file extension; anything other than
        ``.json`` is parsed as YAML.

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with file_path.open("r", encoding="utf-8") as handle:
                if file_path.suffix.lower() == ".json":
                    data = json.load(handle)
                else:
                    data = yaml.safe_load(handle)
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError, OSError) as e:
            raise ConfigurationError(f"Cannot parse configuration file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {path} must contain a mapping, got {type(data).__name__}"
            )

        logger.debug("Loaded configuration file", path=str(file_path))
        return expand_env_vars(data)

    def load_configuration(self) -> Dict[str, Any]:
        """Load configuration from the first default location that exists."""
        explicit = os.environ.get(f"{self.env_prefix}CONFIG")
        if explicit:
            return self.load_from_file(explicit)

        for location in DEFAULT_CONFIG_LOCATIONS:
            if location.is_file():
                return self.load_from_file(str(location))

        logger.debug("No configuration file found, using defaults")
        return {}

    def apply_environment_overrides(
        self, config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Apply ``PATTERNKIT_*`` environment overrides.

        ``PATTERNKIT_LOGGING__LEVEL=DEBUG`` sets ``config["logging"]["level"]``.
        Values are parsed as YAML scalars so numbers and booleans keep their type.
        """
        environ = os.environ if environ is None else environ
        result = _deep_copy(config)

        for name, raw_value in environ.items():
            if not name.startswith(self.env_prefix) or name == f"{self.env_prefix}CONFIG":
                continue
            path = [
                part.lower()
                for part in name[len(self.env_prefix):].split(NESTING_SEPARATOR)
                if part
            ]
            if not path:
                continue

            target = result
            for part in path[:-1]:
                node = target.get(part)
                if not isinstance(node, dict):
                    node = {}
                    target[part] = node
                target = node
            target[path[-1]] = _parse_scalar(raw_value)
            logger.debug("Applied environment override", variable=name)

        return result


def _parse_scalar(raw_value: str) -> Any:
    try:
        return yaml.safe_load(raw_value)
    except yaml.YAMLError:
        return raw_value


def _deep_copy(config: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: _deep_copy(value) if isinstance(value, dict) else value
        for key, value in config.items()
    }
