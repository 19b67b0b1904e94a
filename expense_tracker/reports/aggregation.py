"""
Aggregation Engine

DESIGN DECISION: Aggregation is a family of pure functions.
Given the same expenses and the same month they always return the same
result, never mutate their input, and never touch storage. Every view
recomputes from scratch when the data or the selected month changes.

All sums are exact Decimal arithmetic. Averages are rounded to paise.
Empty input produces zeros and empty lists; nothing here divides by zero.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional

from expense_tracker.budgets.evaluator import BudgetThresholds, evaluate_budget
from expense_tracker.models.expense import CENT, Budget, Expense
from expense_tracker.periods import (
    current_month,
    days_in_month,
    month_key,
    parse_month,
    previous_month,
)
from expense_tracker.models.report import (
    CategorySummary,
    DailySummary,
    DayIntensity,
    GroupSummary,
    MonthlyReport,
    PeriodComparison,
    PeriodSummary,
    Trend,
)


ZERO = Decimal("0.00")

# Heat-map intensity thresholds; a cell's level is 1 + the number it reaches
INTENSITY_LEVELS = (0.2, 0.4, 0.6, 0.8)


def _average(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return (total / count).quantize(CENT, rounding=ROUND_HALF_UP)


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


# =============================================================================
# PERIODS
# =============================================================================

def month_of(expense: Expense) -> str:
    """The YYYY-MM period an expense belongs to."""
    return month_key(expense.date)


def filter_by_month(expenses: Iterable[Expense], month: str) -> list[Expense]:
    """Expenses whose date falls in ``month`` (YYYY-MM), in their original order."""
    return [e for e in expenses if month_of(e) == month]


def available_months(
    expenses: Iterable[Expense],
    include_current: bool = False,
    today: Optional[dt.date] = None,
) -> list[str]:
    """
    Distinct months that have expenses, most recent first.

    Budget views pass ``include_current=True`` so this month can be
    selected even before anything was spent in it.
    """
    months = {month_of(e) for e in expenses}
    if include_current:
        months.add(current_month(today))
    return sorted(months, reverse=True)


# =============================================================================
# GROUPINGS
# =============================================================================

def category_summaries(expenses: Iterable[Expense]) -> list[CategorySummary]:
    """
    Per-category total, count and average, largest total first.

    Only categories that actually occur are returned. Ties keep the
    order in which the categories were first encountered.
    """
    groups: dict = {}
    for expense in expenses:
        total, count = groups.get(expense.category, (ZERO, 0))
        groups[expense.category] = (total + expense.amount, count + 1)

    summaries = [
        CategorySummary(
            category=category,
            total=total,
            count=count,
            average=_average(total, count),
        )
        for category, (total, count) in groups.items()
    ]
    return sorted(summaries, key=lambda s: s.total, reverse=True)


def daily_summaries(expenses: Iterable[Expense]) -> list[DailySummary]:
    """Per-day total and count, most recent day first."""
    groups: dict[dt.date, tuple[Decimal, int]] = {}
    for expense in expenses:
        total, count = groups.get(expense.date, (ZERO, 0))
        groups[expense.date] = (total + expense.amount, count + 1)

    return [
        DailySummary(date=day, total=total, count=count)
        for day, (total, count) in sorted(groups.items(), reverse=True)
    ]


def _group_by_tag(
    expenses: Iterable[Expense],
    tag: Callable[[Expense], Optional[str]],
) -> list[GroupSummary]:
    groups: dict[Optional[str], tuple[Decimal, int]] = {}
    for expense in expenses:
        key = tag(expense)
        total, count = groups.get(key, (ZERO, 0))
        groups[key] = (total + expense.amount, count + 1)

    summaries = [
        GroupSummary(key=key, total=total, count=count)
        for key, (total, count) in groups.items()
    ]
    return sorted(summaries, key=lambda s: s.total, reverse=True)


def group_by_paid_by(expenses: Iterable[Expense]) -> list[GroupSummary]:
    """Spending per household member; unrecorded payer is its own group (key None)."""
    return _group_by_tag(expenses, lambda e: e.paid_by.value if e.paid_by else None)


def group_by_payment_method(expenses: Iterable[Expense]) -> list[GroupSummary]:
    """Spending per payment channel; unrecorded channel is its own group (key None)."""
    return _group_by_tag(
        expenses, lambda e: e.payment_method.value if e.payment_method else None
    )


# =============================================================================
# SUMMARY STATISTICS
# =============================================================================

def period_summary(
    expenses: Iterable[Expense],
    daily: Optional[list[DailySummary]] = None,
) -> PeriodSummary:
    """
    Headline statistics for a set of expenses.

    ``daily`` may be passed in when the caller already computed it.
    """
    expenses = list(expenses)
    if daily is None:
        daily = daily_summaries(expenses)

    total = _sum(e.amount for e in expenses)
    count = len(expenses)
    day_totals = [day.total for day in daily]

    return PeriodSummary(
        total=total,
        count=count,
        average=_average(total, count),
        max_daily=max(day_totals, default=ZERO),
        min_daily=min(day_totals, default=ZERO),
        average_daily=_average(total, len(day_totals)),
    )


def top_expenses(expenses: Iterable[Expense], limit: int = 5) -> list[Expense]:
    """The largest expenses, biggest first."""
    return sorted(expenses, key=lambda e: e.amount, reverse=True)[:limit]


def newest_first(expenses: Iterable[Expense]) -> list[Expense]:
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def recent_daily_trend(daily: list[DailySummary], days: int = 15) -> list[DailySummary]:
    """
    The ``days`` most recent spending days in chronological order,
    ready for a left-to-right trend chart.
    """
    recent = sorted(daily, key=lambda d: d.date, reverse=True)[:days]
    return list(reversed(recent))


def _intensity_level(intensity: float) -> int:
    if intensity == 0:
        return 0
    for level, threshold in enumerate(INTENSITY_LEVELS, start=1):
        if intensity < threshold:
            return level
    return len(INTENSITY_LEVELS) + 1


def daily_intensity(expenses: Iterable[Expense], month: str) -> list[DayIntensity]:
    """
    One heat-map cell for every calendar day of ``month``.

    Intensity is the day's spend relative to the busiest day
    (floored at 1 so a month of tiny amounts doesn't look saturated).
    """
    day_count = days_in_month(month)

    per_day: dict[int, Decimal] = {}
    for expense in filter_by_month(expenses, month):
        per_day[expense.date.day] = per_day.get(expense.date.day, ZERO) + expense.amount

    peak = max([Decimal(1), *per_day.values()])

    cells = []
    for day in range(1, day_count + 1):
        amount = per_day.get(day, ZERO)
        intensity = float(amount / peak)
        cells.append(DayIntensity(
            day=day,
            amount=amount,
            intensity=intensity,
            level=_intensity_level(intensity),
        ))
    return cells


def compare_with_previous_month(expenses: Iterable[Expense], month: str) -> PeriodComparison:
    """
    Total spend in ``month`` against the month before.

    ``change_percentage`` is None when the previous month had no spend.
    """
    expenses = list(expenses)
    before = previous_month(month)
    current_total = _sum(e.amount for e in filter_by_month(expenses, month))
    previous_total = _sum(e.amount for e in filter_by_month(expenses, before))

    change = None
    if previous_total > 0:
        change = ((current_total - previous_total) / previous_total * 100).quantize(
            CENT, rounding=ROUND_HALF_UP
        )

    if current_total > previous_total:
        trend = Trend.UP
    elif current_total < previous_total:
        trend = Trend.DOWN
    else:
        trend = Trend.STABLE

    return PeriodComparison(
        month=month,
        previous_month=before,
        current_total=current_total,
        previous_total=previous_total,
        change_percentage=change,
        trend=trend,
    )


# =============================================================================
# MONTHLY REPORT
# =============================================================================

def build_monthly_report(
    expenses: Iterable[Expense],
    month: str,
    budget: Optional[Budget] = None,
    thresholds: Optional[BudgetThresholds] = None,
    top_limit: int = 5,
    generated_at: Optional[dt.datetime] = None,
) -> MonthlyReport:
    """Compute every view of ``month`` in one pass over the collection."""
    parse_month(month)
    all_expenses = list(expenses)
    monthly = filter_by_month(all_expenses, month)
    daily = daily_summaries(monthly)
    summary = period_summary(monthly, daily)

    return MonthlyReport(
        month=month,
        generated_at=generated_at or dt.datetime.now(),
        expenses=newest_first(monthly),
        summary=summary,
        categories=category_summaries(monthly),
        daily=daily,
        paid_by=group_by_paid_by(monthly),
        payment_methods=group_by_payment_method(monthly),
        top_expenses=top_expenses(monthly, top_limit),
        budget=evaluate_budget(summary.total, budget, month=month, thresholds=thresholds),
        comparison=compare_with_previous_month(all_expenses, month),
    )
