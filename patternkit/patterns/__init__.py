"""One module per catalogued pattern, in catalog order."""

PATTERN_MODULES = [
    "template_method",
    "strategy",
    "observer",
    "proxy",
    "builder",
    "composite",
    "iterator",
    "command",
    "mediator",
]

__all__ = PATTERN_MODULES
