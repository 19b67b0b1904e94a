"""
Expense Store

Ordered collection of expenses, persisted whole after every mutation.

Reads return copies of the in-memory collection in insertion order;
callers filter and sort as needed (``filter`` and ``sorted_by`` cover
the list view's needs).
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense, ExpenseCategory
from expense_tracker.services.storage import KeyValueStorageInterface
from expense_tracker.stores.base import CollectionStore


class ExpenseSortKey(str, Enum):
    """Orderings offered by the expense list."""
    DATE = "date"                # newest first
    AMOUNT = "amount"            # highest first
    CATEGORY = "category"        # alphabetical
    DESCRIPTION = "description"  # alphabetical


class ExpenseStore(CollectionStore[Expense]):
    """
    Owns the expense collection.

    No uniqueness is enforced on ``id``; the caller generates it at
    creation time. ``update`` and ``delete`` act on every record with a
    matching id.
    """

    model = Expense

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        key: str = "expenses",
    ):
        super().__init__(storage, key, audit_logger)
        self._expenses: list[Expense] = self._load_records()

    def __len__(self) -> int:
        return len(self._expenses)

    def all(self) -> list[Expense]:
        """The full collection in insertion order."""
        return list(self._expenses)

    def get(self, expense_id: str) -> Optional[Expense]:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def add(self, expense: Expense) -> Expense:
        """Append an expense and persist."""
        self._expenses = [*self._expenses, expense]
        self._persist(self._expenses)
        self._audit.log_expense_added(expense.id, str(expense.amount), expense.category.value)
        return expense

    def update(self, expense: Expense) -> bool:
        """
        Replace the record with the same id.

        Returns False (and changes nothing) if no record has that id.
        """
        if self.get(expense.id) is None:
            return False
        self._expenses = [
            expense if existing.id == expense.id else existing
            for existing in self._expenses
        ]
        self._persist(self._expenses)
        self._audit.log_expense_updated(expense.id, str(expense.amount), expense.category.value)
        return True

    def delete(self, expense_id: str) -> bool:
        """Remove the record with this id. Returns whether anything was removed."""
        remaining = [e for e in self._expenses if e.id != expense_id]
        if len(remaining) == len(self._expenses):
            return False
        self._expenses = remaining
        self._persist(self._expenses)
        self._audit.log_expense_deleted(expense_id)
        return True

    def clear(self) -> int:
        """Remove every expense. Returns how many were removed."""
        removed = len(self._expenses)
        self._expenses = []
        self._persist(self._expenses)
        self._audit.log_expenses_cleared(removed)
        return removed

    # -------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------

    def by_category(self, category: ExpenseCategory) -> list[Expense]:
        return [e for e in self._expenses if e.category == category]

    def by_month(self, month: str) -> list[Expense]:
        return [e for e in self._expenses if e.month == month]

    def total(self) -> Decimal:
        return sum((e.amount for e in self._expenses), Decimal("0.00"))

    def monthly_total(self, month: str) -> Decimal:
        return sum((e.amount for e in self.by_month(month)), Decimal("0.00"))

    def filter(
        self,
        category: Optional[ExpenseCategory] = None,
        search: str = "",
    ) -> list[Expense]:
        """
        Expenses matching a category (None = all) and a case-insensitive
        substring of the description.
        """
        needle = search.strip().lower()
        return [
            e for e in self._expenses
            if (category is None or e.category == category)
            and needle in e.description.lower()
        ]

    def sorted_by(
        self,
        sort_key: ExpenseSortKey = ExpenseSortKey.DATE,
        expenses: Optional[list[Expense]] = None,
    ) -> list[Expense]:
        """Sort the given expenses (default: the whole collection)."""
        return sort_expenses(self._expenses if expenses is None else expenses, sort_key)


def sort_expenses(expenses: list[Expense], sort_key: ExpenseSortKey) -> list[Expense]:
    """Order expenses the way the list view offers. Sorting is stable."""
    sort_key = ExpenseSortKey(sort_key)
    if sort_key == ExpenseSortKey.AMOUNT:
        return sorted(expenses, key=lambda e: e.amount, reverse=True)
    if sort_key == ExpenseSortKey.CATEGORY:
        return sorted(expenses, key=lambda e: e.category.value.lower())
    if sort_key == ExpenseSortKey.DESCRIPTION:
        return sorted(expenses, key=lambda e: e.description.lower())
    return sorted(expenses, key=lambda e: e.date, reverse=True)
