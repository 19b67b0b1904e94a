"""
Budget Store

Monthly budgets keyed directly by month, so there can never be two
budgets for the same month. ``set`` is an upsert.

The stored blob is still a JSON array of budget records. If an older
blob holds two records for one month, the first one wins, matching how
lookups used to scan the array.
"""

from decimal import Decimal
from typing import Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Budget
from expense_tracker.services.storage import KeyValueStorageInterface
from expense_tracker.stores.base import CollectionStore


class BudgetStore(CollectionStore[Budget]):
    """Owns the month -> Budget mapping."""

    model = Budget

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        key: str = "budgets",
    ):
        super().__init__(storage, key, audit_logger)
        self._budgets: dict[str, Budget] = {}
        for budget in self._load_records():
            self._budgets.setdefault(budget.month, budget)

    def __len__(self) -> int:
        return len(self._budgets)

    def __contains__(self, month: object) -> bool:
        return month in self._budgets

    def all(self) -> list[Budget]:
        """Every budget, most recent month first."""
        return sorted(self._budgets.values(), key=lambda b: b.month, reverse=True)

    def get(self, month: str) -> Optional[Budget]:
        return self._budgets.get(month)

    def set(self, budget: Budget) -> bool:
        """
        Insert or replace the budget for ``budget.month`` and persist.

        Returns True if an existing budget was replaced.
        """
        replaced = budget.month in self._budgets
        self._budgets = {**self._budgets, budget.month: budget}
        self._persist(list(self._budgets.values()))
        self._audit.log_budget_set(budget.month, str(budget.amount), replaced)
        return replaced

    def delete(self, month: str) -> bool:
        """Remove the budget for a month. Returns whether one existed."""
        if month not in self._budgets:
            return False
        self._budgets = {m: b for m, b in self._budgets.items() if m != month}
        self._persist(list(self._budgets.values()))
        self._audit.log_budget_deleted(month)
        return True

    def total_for_month(self, month: str) -> Decimal:
        budget = self._budgets.get(month)
        return budget.amount if budget else Decimal("0.00")
