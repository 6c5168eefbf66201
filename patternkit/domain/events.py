"""Base event classes - records of state changes raised by pattern participants."""
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    """Base class for all domain events."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=_utcnow)
    event_type: str = ""
    source: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def __init__(self, **data):
        # Set event_type based on class name if not provided
        if 'event_type' not in data or not data['event_type']:
            data['event_type'] = self.__class__.__name__
        super().__init__(**data)


class AttributeChangedEvent(DomainEvent):
    """Raised when an observed attribute changes value."""
    attribute: str
    old_value: Any = None
    new_value: Any = None


class CommandEvent(DomainEvent):
    """Raised by an invoker when a command is run, undone or redone."""
    action: str
    description: str
