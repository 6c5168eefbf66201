"""
Proxy pattern.

A proxy stands in for a real subject and forwards calls to it while adding
one concern: access control (protection proxy), lazy creation (virtual
proxy) or location transparency (remote proxy).

Forwarding is declared, not guessed: :func:`forwarding_proxy` takes the
subject's interface (an ABC) and generates one forwarding member per abstract
method or property. Anything outside that interface is not forwarded.
:class:`DynamicForwardingProxy` shows the catch-all ``__getattr__`` style for
comparison.
"""
import abc
import functools
import getpass
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from patternkit.domain.exceptions import (
    AccessDeniedError,
    InsufficientFundsError,
    PatternUsageError,
    RemoteInvocationError,
)
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


# =============================================================================
# SUBJECT
# =============================================================================

class Account(ABC):
    """Interface shared by the real account and its proxies."""

    @property
    @abstractmethod
    def balance(self) -> float:
        """Current balance."""

    @abstractmethod
    def deposit(self, amount: float) -> float:
        """Add money and return the new balance."""

    @abstractmethod
    def withdraw(self, amount: float) -> float:
        """Remove money and return the new balance."""


class BankAccount(Account):
    """The real subject."""

    def __init__(self, starting_balance: float = 0):
        self._balance = starting_balance

    @property
    def balance(self) -> float:
        return self._balance

    def deposit(self, amount: float) -> float:
        _check_amount(amount)
        self._balance += amount
        return self._balance

    def withdraw(self, amount: float) -> float:
        _check_amount(amount)
        if amount > self._balance:
            raise InsufficientFundsError(self._balance, amount)
        self._balance -= amount
        return self._balance

    def close(self) -> None:
        """Not part of the Account interface; proxies do not expose it."""
        self._balance = 0


def _check_amount(amount: float) -> None:
    if amount <= 0:
        raise PatternUsageError(f"Amount must be positive, got {amount}")


# =============================================================================
# FORWARDING
# =============================================================================

def forwarding_proxy(interface: type) -> Callable[[Type[T]], Type[T]]:
    """
    Class decorator generating forwarding members for ``interface``.

    Every abstract method of ``interface`` becomes a method calling
    ``self._forward(name, *args, **kwargs)``; every abstract property becomes
    a property returning ``self._forward_get(name)``. Members the decorated
    class defines itself are left alone.

    Raises:
        PatternUsageError: If ``interface`` is not an ABC with abstract members
    """
    if not (inspect.isclass(interface) and isinstance(interface, abc.ABCMeta)):
        raise PatternUsageError(f"Proxy interface must be an ABC, got {interface!r}")
    names = sorted(getattr(interface, "__abstractmethods__", ()))
    if not names:
        raise PatternUsageError(f"Interface {interface.__name__} declares no abstract members")

    def decorator(cls: Type[T]) -> Type[T]:
        if not hasattr(cls, "_forward") or not hasattr(cls, "_forward_get"):
            raise PatternUsageError(
                f"{cls.__name__} must define _forward and _forward_get; subclass BaseProxy"
            )
        forwarded = []
        for name in names:
            if name in cls.__dict__:
                continue
            setattr(cls, name, _make_forwarder(interface, name))
            forwarded.append(name)

        cls.forwarded_members = frozenset(names)
        if issubclass(cls, interface):
            abc.update_abstractmethods(cls)
        else:
            interface.register(cls)
        logger.debug("Generated forwarding proxy", proxy=cls.__name__, members=forwarded)
        return cls

    return decorator


def _make_forwarder(interface: type, name: str) -> Any:
    member = inspect.getattr_static(interface, name)
    if isinstance(member, property):
        def getter(self):
            return self._forward_get(name)

        return property(getter, doc=member.__doc__)

    @functools.wraps(member)
    def forwarder(self, *args, **kwargs):
        return self._forward(name, *args, **kwargs)

    # The generated method is concrete even though it wraps an abstract one
    forwarder.__isabstractmethod__ = False
    return forwarder


class BaseProxy:
    """Holds the subject and forwards calls to it."""

    def __init__(self, subject: Any):
        self._subject = subject

    def _resolve_subject(self) -> Any:
        return self._subject

    def _forward(self, name: str, *args: Any, **kwargs: Any) -> Any:
        logger.debug("Forwarding call", proxy=type(self).__name__, method=name)
        return getattr(self._resolve_subject(), name)(*args, **kwargs)

    def _forward_get(self, name: str) -> Any:
        return getattr(self._resolve_subject(), name)


# =============================================================================
# VARIANTS
# =============================================================================

class ProtectionProxy(BaseProxy):
    """Checks the current user against the owner before every call."""

    def __init__(
        self,
        subject: Any,
        owner: str,
        current_user_provider: Optional[Callable[[], str]] = None,
    ):
        super().__init__(subject)
        self.owner = owner
        self._current_user = current_user_provider or getpass.getuser

    def check_access(self, operation: str) -> None:
        user = self._current_user()
        if user != self.owner:
            logger.warning("Access denied", user=user, operation=operation)
            raise AccessDeniedError(user, operation)

    def _forward(self, name: str, *args: Any, **kwargs: Any) -> Any:
        self.check_access(name)
        return super()._forward(name, *args, **kwargs)

    def _forward_get(self, name: str) -> Any:
        self.check_access(name)
        return super()._forward_get(name)


class VirtualProxy(BaseProxy):
    """Creates the subject on first use."""

    def __init__(self, factory: Callable[[], Any]):
        super().__init__(None)
        self._factory = factory
        self._materialized = False

    @property
    def is_materialized(self) -> bool:
        return self._materialized

    def _resolve_subject(self) -> Any:
        if not self._materialized:
            logger.debug("Creating subject on first use", proxy=type(self).__name__)
            self._subject = self._factory()
            self._materialized = True
        return self._subject


class RemoteCall(BaseModel):
    """A call marshalled for transport to a remote subject."""
    model_config = ConfigDict(frozen=True)

    method: str
    args: List[Any] = Field(default_factory=list)
    kwargs: Dict[str, Any] = Field(default_factory=dict)
    attribute: bool = False


Transport = Callable[[RemoteCall], Any]


class LoopbackTransport:
    """
    Transport delivering calls to a local object.

    Each call is serialised to JSON and parsed back before it is applied, so
    only wire-safe arguments get through.
    """

    def __init__(self, target: Any):
        self._target = target
        self.calls: List[RemoteCall] = []

    def __call__(self, call: RemoteCall) -> Any:
        received = RemoteCall.model_validate_json(call.model_dump_json())
        self.calls.append(received)
        member = getattr(self._target, received.method)
        if received.attribute:
            return member
        return member(*received.args, **received.kwargs)


class RemoteProxy(BaseProxy):
    """Marshals each call into a :class:`RemoteCall` and hands it to a transport."""

    def __init__(self, transport: Transport):
        super().__init__(None)
        self._transport = transport

    def _send(self, call: RemoteCall) -> Any:
        logger.debug("Sending remote call", method=call.method)
        try:
            return self._transport(call)
        except Exception as e:
            raise RemoteInvocationError(call.method, e) from e

    def _forward(self, name: str, *args: Any, **kwargs: Any) -> Any:
        return self._send(RemoteCall(method=name, args=list(args), kwargs=kwargs))

    def _forward_get(self, name: str) -> Any:
        return self._send(RemoteCall(method=name, attribute=True))


@forwarding_proxy(Account)
class AccountProtectionProxy(ProtectionProxy):
    """Protection proxy exposing exactly the Account interface."""


@forwarding_proxy(Account)
class VirtualAccountProxy(VirtualProxy):
    """Virtual proxy exposing exactly the Account interface."""


@forwarding_proxy(Account)
class RemoteAccountProxy(RemoteProxy):
    """Remote proxy exposing exactly the Account interface."""


class DynamicForwardingProxy:
    """
    Catch-all proxy forwarding any unknown attribute to the subject.

    Shorter to write than an interface-driven proxy, but every attribute of
    the subject leaks through, including ones that were never meant to be
    part of its public interface.
    """

    def __init__(self, subject: Any):
        self._subject = subject

    def __getattr__(self, name: str) -> Any:
        # Only called for attributes not found on the proxy itself
        if name.startswith("__") or name == "_subject":
            raise AttributeError(name)
        logger.debug("Dynamically forwarding", attribute=name)
        return getattr(self._subject, name)
