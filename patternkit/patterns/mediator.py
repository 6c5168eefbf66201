"""
Mediator pattern.

Colleagues talk to a mediator instead of to each other. :class:`ChatRoom` is
the classic example; :class:`EventMediator` routes named events to registered
handlers through a middleware chain.
"""
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from patternkit.domain.exceptions import MediatorError
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class Mediator(ABC):
    """Central point colleagues send their notifications to."""

    @abstractmethod
    def notify(self, sender: "Colleague", event: str, payload: Any = None) -> Any:
        """Handle a notification from ``sender``."""


class Colleague:
    """Participant that only knows its mediator."""

    def __init__(self, name: str, mediator: Optional[Mediator] = None):
        self.name = name
        self.mediator = mediator

    def send(self, event: str, payload: Any = None) -> Any:
        if self.mediator is None:
            raise MediatorError(f"{self.name} is not attached to a mediator")
        return self.mediator.notify(self, event, payload)


# =============================================================================
# CHAT ROOM
# =============================================================================

class User(Colleague):
    """Chat participant with an inbox."""

    def __init__(self, name: str):
        super().__init__(name)
        self.inbox: List[Tuple[str, str]] = []

    def say(self, message: str) -> None:
        self.send("broadcast", {"message": message})

    def whisper(self, recipient: str, message: str) -> None:
        self.send("direct", {"to": recipient, "message": message})

    def receive(self, sender: str, message: str) -> None:
        self.inbox.append((sender, message))


class ChatRoom(Mediator):
    """Delivers messages between users who never reference each other."""

    def __init__(self, name: str = "lobby"):
        self.name = name
        self._users: Dict[str, User] = {}

    @property
    def members(self) -> List[str]:
        return list(self._users)

    def join(self, user: User) -> None:
        if user.name in self._users:
            raise MediatorError(f"User '{user.name}' already joined {self.name}")
        self._users[user.name] = user
        user.mediator = self

    def leave(self, user: User) -> None:
        if self._users.get(user.name) is user:
            del self._users[user.name]
            if user.mediator is self:
                user.mediator = None

    def notify(self, sender: Colleague, event: str, payload: Any = None) -> int:
        """Deliver a message; returns the number of recipients."""
        payload = payload or {}
        message = payload.get("message", "")
        if event == "broadcast":
            recipients = [user for name, user in self._users.items() if name != sender.name]
        elif event == "direct":
            recipient = self._users.get(payload.get("to"))
            if recipient is None:
                raise MediatorError(f"No user '{payload.get('to')}' in {self.name}")
            recipients = [recipient]
        else:
            raise MediatorError(f"Unsupported chat event '{event}'")

        for user in recipients:
            user.receive(sender.name, message)
        logger.debug("Delivered chat message", room=self.name, sender=sender.name, recipients=len(recipients))
        return len(recipients)


# =============================================================================
# EVENT MEDIATOR
# =============================================================================

Handler = Callable[[Colleague, Any], Any]


class MediatorMiddleware(ABC):
    """Base class for mediator middleware."""

    @abstractmethod
    def execute(self, sender: Colleague, event: str, payload: Any, next_handler: Callable[[], Any]) -> Any:
        """Run around the dispatch of one event."""


class LoggingMiddleware(MediatorMiddleware):
    """Middleware for logging dispatch."""

    def execute(self, sender: Colleague, event: str, payload: Any, next_handler: Callable[[], Any]) -> Any:
        start_time = time.time()
        logger.debug("Dispatching event", mediator_event=event, sender=sender.name)
        try:
            result = next_handler()
        except Exception as e:
            logger.error(
                "Event dispatch failed",
                mediator_event=event,
                sender=sender.name,
                duration=round(time.time() - start_time, 3),
                error=str(e),
            )
            raise
        logger.debug(
            "Dispatched event",
            mediator_event=event,
            duration=round(time.time() - start_time, 3),
        )
        return result


class EventMediator(Mediator):
    """
    Routes named events to handlers.

    With ``strict=True`` an event nobody handles raises
    :class:`MediatorError`; otherwise it is logged and ignored.
    """

    def __init__(self, strict: bool = False, middleware: Optional[List[MediatorMiddleware]] = None):
        self.strict = strict
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self.middleware: List[MediatorMiddleware] = (
            list(middleware) if middleware is not None else [LoggingMiddleware()]
        )

    def add_middleware(self, middleware: MediatorMiddleware) -> None:
        self.middleware.append(middleware)

    def register(self, event: str, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def unregister(self, event: str, handler: Handler) -> None:
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def handles(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    def notify(self, sender: Colleague, event: str, payload: Any = None) -> List[Any]:
        """Dispatch to every handler of ``event``; returns their results in order."""
        handlers = list(self._handlers.get(event, []))
        if not handlers:
            if self.strict:
                raise MediatorError(f"No handler registered for event '{event}'")
            logger.info("Unhandled event", mediator_event=event, sender=sender.name)
            return []

        def final_handler() -> List[Any]:
            return [handler(sender, payload) for handler in handlers]

        # Build middleware chain, first middleware outermost
        chain = final_handler
        for middleware in reversed(self.middleware):
            chain = _bind(middleware, sender, event, payload, chain)
        return chain()


def _bind(
    middleware: MediatorMiddleware,
    sender: Colleague,
    event: str,
    payload: Any,
    next_handler: Callable[[], Any],
) -> Callable[[], Any]:
    return lambda: middleware.execute(sender, event, payload, next_handler)
