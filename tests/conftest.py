"""Shared fixtures: in-memory storage, an audit trail to inspect, expense factories."""

import datetime as dt
import itertools

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.models import Expense, ExpenseCategory
from expense_tracker.services.storage import InMemoryAuditStorage, InMemoryStorage


_ids = itertools.count(1)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def make_expense():
    """Build an Expense with sensible defaults; override any field by keyword."""

    def _make(amount="100", description="Lunch", category=ExpenseCategory.FOOD,
              date="2024-03-05", **extra):
        if isinstance(date, str):
            date = dt.date.fromisoformat(date)
        return Expense(
            id=extra.pop("id", f"exp-{next(_ids)}"),
            amount=amount,
            description=description,
            category=category,
            date=date,
            **extra,
        )

    return _make
