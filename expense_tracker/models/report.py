"""
Report Models

Derived results computed from the expense collection for one period.
None of these are persisted; they are rebuilt every time the selected
month or the underlying data changes.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from expense_tracker.models.expense import Expense, ExpenseCategory


ZERO = Decimal("0.00")


class BudgetStatus(str, Enum):
    """
    Budget consumption tier.

    Tiers are ordered: SAFE < WARNING < DANGER.
    """
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class Trend(str, Enum):
    """Direction of spending compared with the previous month."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class CategorySummary(BaseModel):
    """Spending in one category for the period."""

    category: ExpenseCategory
    total: Decimal = ZERO
    count: int = Field(default=0, ge=0)
    average: Decimal = ZERO


class DailySummary(BaseModel):
    """Spending on one calendar day."""

    date: dt.date
    total: Decimal = ZERO
    count: int = Field(default=0, ge=0)


class GroupSummary(BaseModel):
    """
    Spending grouped by an optional tag (paid-by, payment method).

    ``key`` is None for expenses where the tag was not recorded.
    """

    key: Optional[str] = None
    total: Decimal = ZERO
    count: int = Field(default=0, ge=0)

    @property
    def label(self) -> str:
        return self.key if self.key is not None else "Not specified"


class PeriodSummary(BaseModel):
    """Headline statistics for the period."""

    total: Decimal = ZERO
    count: int = Field(default=0, ge=0)
    average: Decimal = ZERO
    max_daily: Decimal = ZERO
    min_daily: Decimal = ZERO
    average_daily: Decimal = ZERO


class CategoryShare(BaseModel):
    """A category's share of the month's total spend."""

    category: ExpenseCategory
    amount: Decimal
    percentage: Decimal


class DayIntensity(BaseModel):
    """One heat-map cell: a calendar day and how hard it was spent on."""

    day: int = Field(..., ge=1, le=31)
    amount: Decimal = ZERO
    intensity: float = Field(default=0.0, ge=0.0, le=1.0)
    level: int = Field(default=0, ge=0, le=5)


class PeriodComparison(BaseModel):
    """Month-over-month comparison of total spend."""

    month: str
    previous_month: str
    current_total: Decimal = ZERO
    previous_total: Decimal = ZERO
    change_percentage: Optional[Decimal] = None
    trend: Trend = Trend.STABLE


class BudgetEvaluation(BaseModel):
    """
    Spend for a month measured against its budget.

    When no budget exists ``has_budget`` is False and every budget-derived
    field is None; this is distinct from a budget of any amount.
    """

    month: Optional[str] = None
    has_budget: bool
    spent: Decimal = ZERO
    budget_amount: Optional[Decimal] = None
    ratio: Optional[Decimal] = Field(
        default=None,
        description="Unclamped spend as a percentage of budget"
    )
    percentage: Optional[Decimal] = Field(
        default=None,
        description="Spend percentage clamped to 100 for progress display"
    )
    remaining: Optional[Decimal] = Field(
        default=None,
        description="Budget minus spend; negative when over budget"
    )
    status: Optional[BudgetStatus] = None

    @property
    def is_over_budget(self) -> bool:
        return self.remaining is not None and self.remaining < 0

    @property
    def display_amount(self) -> Optional[Decimal]:
        """Magnitude shown next to 'remaining' or 'over budget'."""
        if self.remaining is None:
            return None
        return abs(self.remaining)

    @property
    def remaining_label(self) -> Optional[str]:
        if self.remaining is None:
            return None
        return "over budget" if self.is_over_budget else "remaining"


class MonthlyReport(BaseModel):
    """Everything the report views and the exporter need for one month."""

    month: str
    generated_at: dt.datetime = Field(default_factory=dt.datetime.now)
    expenses: list[Expense] = Field(
        default_factory=list,
        description="The month's expenses, newest first"
    )
    summary: PeriodSummary = Field(default_factory=PeriodSummary)
    categories: list[CategorySummary] = Field(default_factory=list)
    daily: list[DailySummary] = Field(default_factory=list)
    paid_by: list[GroupSummary] = Field(default_factory=list)
    payment_methods: list[GroupSummary] = Field(default_factory=list)
    top_expenses: list[Expense] = Field(default_factory=list)
    budget: Optional[BudgetEvaluation] = None
    comparison: Optional[PeriodComparison] = None

    @property
    def is_empty(self) -> bool:
        return self.summary.count == 0
