"""Stores package: the expense and budget collections."""

from expense_tracker.stores.budget_store import BudgetStore
from expense_tracker.stores.expense_store import (
    ExpenseSortKey,
    ExpenseStore,
    sort_expenses,
)

__all__ = [
    "BudgetStore",
    "ExpenseSortKey",
    "ExpenseStore",
    "sort_expenses",
]
