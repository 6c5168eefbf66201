"""patternkit - Root Package.

Companion library to the classic object-oriented design patterns catalog.
Every pattern described in the catalog has a small, self-contained
implementation that can be imported, tested and run from the command line.

Key Components:
    - domain: The catalog itself, domain events and the exception hierarchy
    - patterns: One module per catalogued pattern
    - application: Runnable demonstrations for each pattern
    - config: Configuration schemas, loading and management
    - infrastructure: Logging setup
    - cli: Command line interface

Usage:
    >>> from patternkit.domain.catalog import Catalog
    >>> [entry.name for entry in Catalog.default()][:3]
    ['Template Method', 'Strategy', 'Observer']
"""

from ._package import PACKAGE_NAME, __version__

__package_name__ = PACKAGE_NAME

__all__ = ["PACKAGE_NAME", "__version__"]
