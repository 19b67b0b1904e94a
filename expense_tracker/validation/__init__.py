"""Input validation package."""

from expense_tracker.validation.validator import (
    BudgetInputValidator,
    ExpenseInputValidator,
    get_user_friendly_summary,
)

__all__ = [
    "BudgetInputValidator",
    "ExpenseInputValidator",
    "get_user_friendly_summary",
]
