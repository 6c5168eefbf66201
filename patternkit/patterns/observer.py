"""
Observer pattern.

A :class:`Subject` keeps a list of observers and notifies them when its state
changes. Two hazards named by the pattern are handled explicitly:

* Notifying observers before all related updates are applied exposes an
  inconsistent state. ``with subject.changes():`` groups several updates and
  sends a single notification once the block completes.
* What to do when an observer raises varies from case to case, so the
  behaviour is chosen per subject through :class:`ObserverErrorPolicy`.
"""
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple, Union, runtime_checkable

from patternkit.domain.events import AttributeChangedEvent
from patternkit.domain.exceptions import ObserverNotificationError, PatternUsageError
from patternkit.domain.policies import ObserverErrorPolicy
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Observer(Protocol):
    """Protocol for observers."""

    def update(self, subject: Any) -> None:
        """Called after the subject changed."""
        ...


ObserverLike = Union[Observer, Callable[[Any], None]]


def _observer_name(observer: ObserverLike) -> str:
    return getattr(observer, "__name__", type(observer).__name__)


class Subject:
    """
    Mixin that manages observers and notification.

    Subclasses call :meth:`changed` when their state changes. Outside a
    ``changes()`` block every change notifies immediately; inside one the
    notification is deferred until the outermost block exits normally.
    """

    def __init__(self, error_policy: ObserverErrorPolicy = ObserverErrorPolicy.PROPAGATE):
        self._observers: List[ObserverLike] = []
        self._error_policy = ObserverErrorPolicy(error_policy)
        self._batch_depth = 0
        self._dirty = False

    @property
    def error_policy(self) -> ObserverErrorPolicy:
        return self._error_policy

    @error_policy.setter
    def error_policy(self, policy: ObserverErrorPolicy) -> None:
        self._error_policy = ObserverErrorPolicy(policy)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def add_observer(self, observer: ObserverLike) -> None:
        if not (isinstance(observer, Observer) or callable(observer)):
            raise PatternUsageError(
                f"Observer must define update() or be callable, got {type(observer).__name__}"
            )
        if observer not in self._observers:
            self._observers.append(observer)

    def delete_observer(self, observer: ObserverLike) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @contextmanager
    def changes(self) -> Iterator["Subject"]:
        """
        Group several updates into one notification.

        If the block raises, no notification is sent for the batch; the
        updates already applied are kept.
        """
        self._batch_depth += 1
        try:
            yield self
        except BaseException:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._dirty = False
            raise
        self._batch_depth -= 1
        if self._batch_depth == 0 and self._dirty:
            self.notify_observers()

    @property
    def in_batch(self) -> bool:
        return self._batch_depth > 0

    def changed(self) -> None:
        """Mark the subject changed, notifying now unless inside a batch."""
        if self.in_batch:
            self._dirty = True
        else:
            self.notify_observers()

    def notify_observers(self) -> None:
        self._dirty = False
        # Observers may add or delete observers while being notified
        observers = list(self._observers)
        failures: List[Tuple[ObserverLike, Exception]] = []

        logger.debug(
            "Notifying observers",
            subject=type(self).__name__,
            observers=len(observers),
        )

        for observer in observers:
            try:
                if isinstance(observer, Observer):
                    observer.update(self)
                else:
                    observer(self)
            except Exception as e:
                if self._error_policy is ObserverErrorPolicy.PROPAGATE:
                    raise
                if self._error_policy is ObserverErrorPolicy.LOG:
                    logger.error(
                        "Observer raised during notification",
                        subject=type(self).__name__,
                        observer=_observer_name(observer),
                        error=str(e),
                    )
                else:
                    failures.append((observer, e))

        if failures:
            raise ObserverNotificationError(failures)


class Employee(Subject):
    """Subject whose salary and title changes are observed."""

    def __init__(
        self,
        name: str,
        title: str,
        salary: float,
        error_policy: ObserverErrorPolicy = ObserverErrorPolicy.PROPAGATE,
    ):
        super().__init__(error_policy)
        self.name = name
        self._title = title
        self._salary = salary
        self.change_history: List[AttributeChangedEvent] = []

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, new_title: str) -> None:
        old_title, self._title = self._title, new_title
        self._record("title", old_title, new_title)

    @property
    def salary(self) -> float:
        return self._salary

    @salary.setter
    def salary(self, new_salary: float) -> None:
        old_salary, self._salary = self._salary, new_salary
        self._record("salary", old_salary, new_salary)

    def _record(self, attribute: str, old_value: Any, new_value: Any) -> None:
        if old_value == new_value:
            return
        self.change_history.append(
            AttributeChangedEvent(
                source=self.name,
                attribute=attribute,
                old_value=old_value,
                new_value=new_value,
            )
        )
        self.changed()

    def promote(self, title: str, salary: float) -> None:
        """Change title and salary together; observers see both or neither."""
        with self.changes():
            self.title = title
            self.salary = salary


class Payroll:
    """Observer that records every salary it is told about."""

    def __init__(self):
        self.notifications: List[Tuple[str, str, float]] = []

    def update(self, employee: Employee) -> None:
        self.notifications.append((employee.name, employee.title, employee.salary))

    @property
    def last(self) -> Optional[Tuple[str, str, float]]:
        return self.notifications[-1] if self.notifications else None


class TaxMan:
    """Observer that keeps the latest known salary per employee."""

    def __init__(self):
        self.salaries: dict = {}

    def update(self, employee: Employee) -> None:
        self.salaries[employee.name] = employee.salary

    @property
    def total(self) -> float:
        return sum(self.salaries.values())
