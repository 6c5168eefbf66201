"""Package metadata and naming constants."""

PACKAGE_NAME = "patternkit"
PACKAGE_NAME_SHORT = "pk"
__version__ = "1.0.0"
VERSION = __version__  # Alias for compatibility
DESCRIPTION = "Companion library for the classic object-oriented design patterns catalog"

# Environment variable prefix used for configuration overrides
ENV_PREFIX = "PATTERNKIT_"
