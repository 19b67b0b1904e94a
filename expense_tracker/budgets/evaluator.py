"""
Budget Evaluator

Measures a month's spend against its budget.

Status tiers use the raw (unclamped) percentage of the budget spent:
    ratio <= safe threshold      -> SAFE
    ratio <= warning threshold   -> WARNING
    otherwise                    -> DANGER
The displayed percentage is clamped to 100 so a progress bar never overflows.

A month without a budget is reported as such (has_budget=False); it is
never treated as a zero budget.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from expense_tracker.models.expense import CENT, Budget, Expense
from expense_tracker.models.report import BudgetEvaluation, BudgetStatus, CategoryShare


HUNDRED = Decimal(100)


@dataclass(frozen=True)
class BudgetThresholds:
    """Upper bounds (percent of budget spent) for the SAFE and WARNING tiers."""

    safe: Decimal = Decimal(50)
    warning: Decimal = Decimal(80)

    def __post_init__(self):
        if self.safe > self.warning:
            raise ValueError("Safe threshold cannot exceed warning threshold")

    @classmethod
    def from_settings(cls, safe: float, warning: float) -> "BudgetThresholds":
        return cls(safe=Decimal(str(safe)), warning=Decimal(str(warning)))


DEFAULT_THRESHOLDS = BudgetThresholds()


def budget_status(ratio: Decimal, thresholds: BudgetThresholds = DEFAULT_THRESHOLDS) -> BudgetStatus:
    """Tier for an unclamped spend percentage."""
    if ratio <= thresholds.safe:
        return BudgetStatus.SAFE
    if ratio <= thresholds.warning:
        return BudgetStatus.WARNING
    return BudgetStatus.DANGER


def evaluate_budget(
    spent: Decimal,
    budget: Optional[Budget],
    month: Optional[str] = None,
    thresholds: Optional[BudgetThresholds] = None,
) -> BudgetEvaluation:
    """
    Compare ``spent`` with ``budget``.

    Args:
        spent: Total spend for the period (PeriodSummary.total)
        budget: The period's budget, or None if none was set
        month: Period label; defaults to the budget's month
        thresholds: Tier boundaries (defaults: 50 / 80)
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS

    if budget is None:
        return BudgetEvaluation(month=month, has_budget=False, spent=spent)

    ratio = spent / budget.amount * HUNDRED
    remaining = budget.amount - spent

    return BudgetEvaluation(
        month=month or budget.month,
        has_budget=True,
        spent=spent,
        budget_amount=budget.amount,
        ratio=ratio.quantize(CENT, rounding=ROUND_HALF_UP),
        percentage=min(ratio, HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP),
        remaining=remaining,
        status=budget_status(ratio, thresholds),
    )


def category_shares(expenses: Iterable[Expense]) -> list[CategoryShare]:
    """
    Each category's share of the total spend, largest first.

    Used next to the budget bar; percentages are rounded to one decimal.
    """
    amounts: dict = {}
    for expense in expenses:
        amounts[expense.category] = amounts.get(expense.category, Decimal("0.00")) + expense.amount

    total = sum(amounts.values(), Decimal("0.00"))
    if total == 0:
        return []

    shares = [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=(amount / total * HUNDRED).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        )
        for category, amount in amounts.items()
    ]
    return sorted(shares, key=lambda s: s.amount, reverse=True)
