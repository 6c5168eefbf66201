# patternkit/domain/exceptions.py
from typing import Any, List, Optional, Tuple


class DomainException(Exception):
    """Base exception for all patternkit errors."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation fails."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class PatternNotFoundError(DomainException, KeyError):
    """Raised when a pattern, strategy or demo cannot be found by name."""
    def __init__(self, kind: str, name: str):
        DomainException.__init__(self, f"{kind} '{name}' not found")
        self.kind = kind
        self.name = name

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.args[0]


class PatternUsageError(DomainException, TypeError):
    """Raised when a pattern participant is used incorrectly."""
    pass


class CatalogValidationError(ValidationError):
    """Raised when the catalog entries are inconsistent."""
    pass


class BuilderValidationError(ValidationError):
    """Raised when a builder cannot produce a valid product."""
    def __init__(self, product: str, problems: List[str]):
        super().__init__(
            f"Cannot build {product}: {'; '.join(problems)}", problems
        )
        self.product = product
        self.problems = problems


class ObserverNotificationError(DomainException):
    """Raised after notification when one or more observers failed."""
    def __init__(self, failures: List[Tuple[Any, Exception]]):
        names = ", ".join(
            f"{getattr(obs, '__name__', type(obs).__name__)}: {err}"
            for obs, err in failures
        )
        super().__init__(f"{len(failures)} observer(s) failed: {names}")
        self.failures = failures


class AccessDeniedError(DomainException):
    """Raised by a protection proxy when the caller is not allowed."""
    def __init__(self, user: str, operation: str):
        super().__init__(f"User '{user}' is not allowed to call {operation}")
        self.user = user
        self.operation = operation


class InsufficientFundsError(DomainException):
    """Raised when a withdrawal exceeds the account balance."""
    def __init__(self, balance: float, amount: float):
        super().__init__(f"Cannot withdraw {amount}: balance is {balance}")
        self.balance = balance
        self.amount = amount


class RemoteInvocationError(DomainException):
    """Raised when a remote proxy fails to deliver a call."""
    def __init__(self, method: str, original_error: Optional[Exception] = None):
        message = f"Remote call {method} failed"
        if original_error:
            message += f" | Caused by: {type(original_error).__name__}: {original_error}"
        super().__init__(message)
        self.method = method
        self.original_error = original_error


class CompositeCycleError(DomainException):
    """Raised when adding a node would create a cycle in a composite tree."""
    def __init__(self, parent: str, child: str):
        super().__init__(f"Cannot add '{child}' to '{parent}': would create a cycle")
        self.parent = parent
        self.child = child


class IteratorExhaustedError(DomainException, IndexError):
    """Raised when an external iterator is advanced past its end."""
    pass


class CommandError(DomainException):
    """Base exception for command and invoker errors."""
    pass


class UndoNotSupportedError(CommandError):
    """Raised when undoing a command that cannot be undone."""
    def __init__(self, description: str):
        super().__init__(f"Command '{description}' cannot be undone")
        self.description = description


class CommandExecutionError(CommandError):
    """Raised when a command fails during execution."""
    def __init__(self, command: Any, original_error: Optional[Exception] = None):
        description = getattr(command, "description", repr(command))
        message = f"Command '{description}' failed"
        if original_error:
            message += f" | Caused by: {type(original_error).__name__}: {original_error}"
        super().__init__(message)
        self.command = command
        self.original_error = original_error


class MediatorError(DomainException):
    """Raised when a mediator cannot route a message."""
    pass
