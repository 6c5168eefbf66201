"""Per-pattern configuration schemas."""
from pydantic import BaseModel, Field, field_validator

from patternkit.domain.policies import ObserverErrorPolicy


class ObserverConfig(BaseModel):
    """Observer notification configuration."""

    error_policy: ObserverErrorPolicy = Field(
        ObserverErrorPolicy.PROPAGATE,
        description="What a subject does when an observer raises",
    )


class CommandConfig(BaseModel):
    """Command invoker configuration."""

    history_length: int = Field(100, description="Maximum number of undoable commands kept")

    @field_validator("history_length")
    @classmethod
    def validate_history_length(cls, v: int) -> int:
        """Validate history length."""
        if v < 1:
            raise ValueError("History length must be at least 1")
        return v


class MediatorConfig(BaseModel):
    """Mediator routing configuration."""

    strict: bool = Field(False, description="Raise on events without handlers")
