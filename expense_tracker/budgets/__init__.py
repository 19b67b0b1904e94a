"""Budget evaluation package."""

from expense_tracker.budgets.evaluator import (
    DEFAULT_THRESHOLDS,
    BudgetThresholds,
    budget_status,
    category_shares,
    evaluate_budget,
)

__all__ = [
    "DEFAULT_THRESHOLDS",
    "BudgetThresholds",
    "budget_status",
    "category_shares",
    "evaluate_budget",
]
