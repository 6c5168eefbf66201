"""Shared fixtures for patternkit tests."""
import os

import pytest

from patternkit.domain.catalog import Catalog
from patternkit.patterns.observer import Employee, Payroll
from patternkit.patterns.proxy import BankAccount


@pytest.fixture
def catalog():
    return Catalog.default()


@pytest.fixture
def employee():
    return Employee("Fred", "Crane Operator", 30000)


@pytest.fixture
def payroll(employee):
    observer = Payroll()
    employee.add_observer(observer)
    return observer


@pytest.fixture
def account():
    return BankAccount(100)


@pytest.fixture(autouse=True)
def clean_patternkit_env(monkeypatch):
    """Keep PATTERNKIT_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("PATTERNKIT_"):
            monkeypatch.delenv(name, raising=False)
