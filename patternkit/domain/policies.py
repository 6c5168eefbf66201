"""Policy enumerations shared by pattern implementations and configuration."""
from enum import Enum


class ObserverErrorPolicy(str, Enum):
    """What a subject does when one of its observers raises."""

    PROPAGATE = "propagate"  # stop dispatch and re-raise the first error
    LOG = "log"  # log the error and keep notifying
    COLLECT = "collect"  # notify everyone, then raise all errors together
