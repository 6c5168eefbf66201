"""Domain layer - the pattern catalog, domain events and exceptions."""

from .catalog import CANONICAL_ORDER, GLOSSARY, Catalog, PatternCategory, PatternEntry
from .events import AttributeChangedEvent, CommandEvent, DomainEvent
from .exceptions import DomainException
from .policies import ObserverErrorPolicy

__all__ = [
    "CANONICAL_ORDER",
    "GLOSSARY",
    "Catalog",
    "PatternCategory",
    "PatternEntry",
    "AttributeChangedEvent",
    "CommandEvent",
    "DomainEvent",
    "DomainException",
    "ObserverErrorPolicy",
]
