"""Tests for the Observer pattern."""
from unittest.mock import Mock, patch

import pytest

from patternkit.domain.exceptions import ObserverNotificationError, PatternUsageError
from patternkit.domain.policies import ObserverErrorPolicy
from patternkit.patterns.observer import Employee, Payroll, Subject, TaxMan


class FailingObserver:
    def update(self, subject):
        raise RuntimeError("observer broke")


class TestSubject:
    """Test observer registration."""

    def test_observer_notified_on_change(self, employee, payroll):
        employee.salary = 35000
        assert payroll.notifications == [("Fred", "Crane Operator", 35000)]

    def test_duplicate_add_ignored(self, employee, payroll):
        employee.add_observer(payroll)
        assert employee.observer_count == 1

    def test_delete_observer(self, employee, payroll):
        employee.delete_observer(payroll)
        employee.salary = 1
        assert payroll.notifications == []

    def test_delete_unknown_observer_is_noop(self, employee):
        employee.delete_observer(Payroll())
        assert employee.observer_count == 0

    def test_callable_observer(self, employee):
        seen = []
        employee.add_observer(lambda subject: seen.append(subject.salary))
        employee.salary = 40000
        assert seen == [40000]

    def test_non_observer_rejected(self, employee):
        with pytest.raises(PatternUsageError):
            employee.add_observer(42)

    def test_unchanged_value_does_not_notify(self, employee, payroll):
        employee.salary = 30000
        assert payroll.notifications == []
        assert employee.change_history == []

    def test_observer_removed_during_notification(self, employee, payroll):
        # Arrange
        def detach(subject):
            subject.delete_observer(detach)

        employee.add_observer(detach)

        # Act
        employee.salary = 1

        # Assert: payroll still notified, detach ran once
        assert payroll.notifications == [("Fred", "Crane Operator", 1)]
        assert employee.observer_count == 1

    def test_multiple_observers(self, employee, payroll):
        taxman = TaxMan()
        employee.add_observer(taxman)
        employee.salary = 50000
        assert taxman.total == 50000
        assert payroll.last == ("Fred", "Crane Operator", 50000)


class TestChanges:
    """Test batching of updates into one notification."""

    def test_promote_notifies_once_with_consistent_state(self, employee, payroll):
        employee.promote("Foreman", 45000)
        assert payroll.notifications == [("Fred", "Foreman", 45000)]

    def test_nested_batches_notify_at_outermost_exit(self, employee, payroll):
        with employee.changes():
            employee.title = "Foreman"
            with employee.changes():
                employee.salary = 45000
            assert payroll.notifications == []
            assert employee.in_batch
        assert len(payroll.notifications) == 1
        assert not employee.in_batch

    def test_empty_batch_does_not_notify(self, employee, payroll):
        with employee.changes():
            pass
        assert payroll.notifications == []

    def test_exception_in_batch_suppresses_notification(self, employee, payroll):
        with pytest.raises(ValueError):
            with employee.changes():
                employee.salary = 99
                raise ValueError("abort")

        assert payroll.notifications == []
        assert employee.salary == 99
        assert not employee.in_batch

        # Next change notifies normally
        employee.title = "Clerk"
        assert payroll.notifications == [("Fred", "Clerk", 99)]

    def test_change_history_records_events(self, employee):
        employee.promote("Foreman", 45000)
        events = [(e.attribute, e.old_value, e.new_value) for e in employee.change_history]
        assert events == [("title", "Crane Operator", "Foreman"), ("salary", 30000, 45000)]
        assert employee.change_history[0].source == "Fred"
        assert employee.change_history[0].event_type == "AttributeChangedEvent"


class TestErrorPolicy:
    """Test what happens when an observer raises."""

    def test_propagate_is_default(self, employee):
        employee.add_observer(FailingObserver())
        with pytest.raises(RuntimeError):
            employee.salary = 1

    def test_propagate_stops_remaining_observers(self, employee):
        payroll = Payroll()
        employee.add_observer(FailingObserver())
        employee.add_observer(payroll)
        with pytest.raises(RuntimeError):
            employee.salary = 1
        assert payroll.notifications == []

    def test_log_policy_continues(self):
        # Arrange
        employee = Employee("Ann", "Clerk", 10, error_policy=ObserverErrorPolicy.LOG)
        payroll = Payroll()
        employee.add_observer(FailingObserver())
        employee.add_observer(payroll)

        # Act
        with patch("patternkit.patterns.observer.logger") as mock_logger:
            employee.salary = 20

        # Assert
        assert payroll.notifications == [("Ann", "Clerk", 20)]
        mock_logger.error.assert_called_once()

    def test_collect_policy_raises_after_all_observers(self):
        employee = Employee("Ann", "Clerk", 10, error_policy="collect")
        payroll = Payroll()
        failing = FailingObserver()
        employee.add_observer(failing)
        employee.add_observer(payroll)

        with pytest.raises(ObserverNotificationError) as exc_info:
            employee.salary = 20

        assert payroll.notifications == [("Ann", "Clerk", 20)]
        assert exc_info.value.failures[0][0] is failing
        assert isinstance(exc_info.value.failures[0][1], RuntimeError)

    def test_policy_can_be_changed(self):
        subject = Subject()
        subject.error_policy = "log"
        assert subject.error_policy is ObserverErrorPolicy.LOG

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError):
            Subject(error_policy="ignore")


def test_mock_observer_receives_subject(employee):
    observer = Mock(spec=["update"])
    employee.add_observer(observer)
    employee.title = "Driver"
    observer.update.assert_called_once_with(employee)
