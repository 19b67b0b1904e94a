"""Tests for the aggregation engine."""

import datetime as dt
from decimal import Decimal

import pytest

from expense_tracker.budgets import BudgetThresholds
from expense_tracker.models import Budget, BudgetStatus, ExpenseCategory, PaidBy, PaymentMethod, Trend
from expense_tracker.reports import (
    available_months,
    build_monthly_report,
    category_summaries,
    compare_with_previous_month,
    daily_intensity,
    daily_summaries,
    filter_by_month,
    group_by_paid_by,
    group_by_payment_method,
    month_of,
    period_summary,
    recent_daily_trend,
    top_expenses,
)


@pytest.fixture
def march(make_expense):
    """Two food expenses and one travel expense in March 2024."""
    return [
        make_expense(amount=100, category=ExpenseCategory.FOOD, date="2024-03-01"),
        make_expense(amount=200, category=ExpenseCategory.FOOD, date="2024-03-02"),
        make_expense(amount=50, category=ExpenseCategory.TRAVEL, date="2024-03-03"),
    ]


class TestMonthlyScenario:
    """The reference month: Food 100 + 200, Travel 50."""

    def test_category_totals(self, march):
        """Test per-category totals, counts and averages."""
        summaries = category_summaries(filter_by_month(march, "2024-03"))
        assert [(s.category, s.total, s.count, s.average) for s in summaries] == [
            (ExpenseCategory.FOOD, Decimal("300.00"), 2, Decimal("150.00")),
            (ExpenseCategory.TRAVEL, Decimal("50.00"), 1, Decimal("50.00")),
        ]

    def test_period_summary(self, march):
        """Test headline statistics."""
        summary = period_summary(march)
        assert summary.total == Decimal("350.00")
        assert summary.count == 3
        assert summary.average == Decimal("116.67")
        assert summary.max_daily == Decimal("200.00")
        assert summary.min_daily == Decimal("50.00")
        assert summary.average_daily == Decimal("116.67")

    def test_over_budget(self, march):
        """Test a 300 budget against 350 spent."""
        report = build_monthly_report(march, "2024-03", Budget(month="2024-03", amount=300))
        assert report.budget.remaining == Decimal("-50.00")
        assert report.budget.status == BudgetStatus.DANGER
        assert report.budget.remaining_label == "over budget"
        assert report.budget.display_amount == Decimal("50.00")
        assert report.budget.percentage == Decimal("100.00")

    def test_within_budget(self, march):
        """Test a 1000 budget against 350 spent."""
        report = build_monthly_report(march, "2024-03", Budget(month="2024-03", amount=1000))
        assert report.budget.ratio == Decimal("35.00")
        assert report.budget.status == BudgetStatus.SAFE
        assert report.budget.remaining == Decimal("650.00")


class TestProperties:
    """Invariants that hold for any input."""

    def test_category_totals_sum_to_period_total(self, make_expense):
        """Test that category totals and counts add up to the period's."""
        expenses = [
            make_expense(amount=a, category=c, date=d)
            for a, c, d in [
                ("10.10", ExpenseCategory.FOOD, "2024-05-01"),
                ("20.20", ExpenseCategory.SHOPPING, "2024-05-01"),
                ("0.01", ExpenseCategory.OTHER, "2024-05-09"),
                ("999.99", ExpenseCategory.FOOD, "2024-05-31"),
                ("33.33", ExpenseCategory.HEALTHCARE, "2024-05-15"),
            ]
        ]
        summary = period_summary(expenses)
        categories = category_summaries(expenses)
        assert sum(c.total for c in categories) == summary.total
        assert sum(c.count for c in categories) == summary.count
        assert sum(d.total for d in daily_summaries(expenses)) == summary.total

    def test_empty_input(self):
        """Test that empty input yields zeros and empty lists."""
        summary = period_summary([])
        assert summary.total == Decimal("0")
        assert summary.count == 0
        assert summary.average == Decimal("0")
        assert summary.max_daily == summary.min_daily == Decimal("0")
        assert category_summaries([]) == []
        assert daily_summaries([]) == []
        assert group_by_paid_by([]) == []
        assert top_expenses([]) == []

    def test_functions_do_not_mutate_input(self, march):
        """Test that aggregation leaves the input list untouched."""
        snapshot = list(march)
        build_monthly_report(march, "2024-03")
        top_expenses(march)
        assert march == snapshot


class TestGroupings:
    """Tests for the per-day and per-tag groupings."""

    def test_daily_summaries_newest_first(self, make_expense):
        """Test per-day totals and ordering."""
        expenses = [
            make_expense(amount=10, date="2024-03-02"),
            make_expense(amount=15, date="2024-03-05"),
            make_expense(amount=5, date="2024-03-02"),
        ]
        daily = daily_summaries(expenses)
        assert [(d.date, d.total, d.count) for d in daily] == [
            (dt.date(2024, 3, 5), Decimal("15.00"), 1),
            (dt.date(2024, 3, 2), Decimal("15.00"), 2),
        ]

    def test_category_tie_keeps_first_seen_order(self, make_expense):
        """Test stable ordering when totals tie."""
        expenses = [
            make_expense(amount=50, category=ExpenseCategory.SHOPPING),
            make_expense(amount=50, category=ExpenseCategory.EDUCATION),
        ]
        assert [s.category for s in category_summaries(expenses)] == [
            ExpenseCategory.SHOPPING, ExpenseCategory.EDUCATION
        ]

    def test_missing_tags_are_their_own_group(self, make_expense):
        """Test that unrecorded payer / method is a separate bucket."""
        expenses = [
            make_expense(amount=100, paid_by=PaidBy.DAD, payment_method=PaymentMethod.GPAY),
            make_expense(amount=300),
            make_expense(amount=50, paid_by=PaidBy.DAD, payment_method=PaymentMethod.CASH),
        ]
        payers = group_by_paid_by(expenses)
        assert [(g.key, g.total, g.count) for g in payers] == [
            (None, Decimal("300.00"), 1),
            ("Dad", Decimal("150.00"), 2),
        ]
        assert payers[0].label == "Not specified"

        methods = group_by_payment_method(expenses)
        assert [g.key for g in methods] == [None, "GPay", "Cash"]


class TestPeriods:
    """Tests for month selection helpers."""

    def test_filter_by_month(self, make_expense):
        """Test that only the selected month is kept."""
        expenses = [
            make_expense(date="2024-02-29"),
            make_expense(date="2024-03-01"),
            make_expense(date="2023-03-15"),
        ]
        assert [e.date for e in filter_by_month(expenses, "2024-03")] == [dt.date(2024, 3, 1)]
        assert [month_of(e) for e in expenses] == ["2024-02", "2024-03", "2023-03"]

    def test_available_months(self, make_expense):
        """Test distinct months, most recent first, optionally with the current month."""
        expenses = [
            make_expense(date="2024-01-10"),
            make_expense(date="2024-03-01"),
            make_expense(date="2024-01-20"),
        ]
        assert available_months(expenses) == ["2024-03", "2024-01"]
        assert available_months(expenses, include_current=True, today=dt.date(2024, 6, 1)) == [
            "2024-06", "2024-03", "2024-01"
        ]

    def test_build_report_rejects_bad_month(self, march):
        """Test that the month label is checked."""
        with pytest.raises(ValueError):
            build_monthly_report(march, "2024-3")


class TestRankingAndTrend:
    """Tests for top expenses and the daily trend window."""

    def test_top_expenses(self, make_expense):
        """Test the largest expenses, biggest first, limited."""
        expenses = [make_expense(amount=a) for a in (5, 50, 20, 500, 1, 70)]
        assert [e.amount for e in top_expenses(expenses, limit=3)] == [
            Decimal("500.00"), Decimal("70.00"), Decimal("50.00")
        ]

    def test_recent_daily_trend_is_chronological(self, make_expense):
        """Test that the trend keeps the most recent days, oldest first."""
        expenses = [make_expense(date=f"2024-03-{day:02d}") for day in range(1, 21)]
        trend = recent_daily_trend(daily_summaries(expenses), days=15)
        assert len(trend) == 15
        assert trend[0].date == dt.date(2024, 3, 6)
        assert trend[-1].date == dt.date(2024, 3, 20)


class TestHeatmap:
    """Tests for daily intensity cells."""

    def test_one_cell_per_calendar_day(self, make_expense):
        """Test cell count including leap-year February."""
        assert len(daily_intensity([], "2024-02")) == 29
        assert len(daily_intensity([], "2023-02")) == 28
        assert len(daily_intensity([], "2024-03")) == 31

    def test_levels_relative_to_busiest_day(self, make_expense):
        """Test intensity buckets."""
        expenses = [
            make_expense(amount=1000, date="2024-03-01"),
            make_expense(amount=500, date="2024-03-02"),
            make_expense(amount=100, date="2024-03-03"),
            make_expense(amount=900, date="2024-03-04"),
            make_expense(amount=700, date="2024-02-01"),
        ]
        cells = daily_intensity(expenses, "2024-03")
        by_day = {c.day: c for c in cells}
        assert by_day[1].intensity == 1.0 and by_day[1].level == 5
        assert by_day[2].level == 3
        assert by_day[3].level == 1
        assert by_day[4].level == 5
        assert by_day[5].amount == Decimal("0") and by_day[5].level == 0

    def test_tiny_amounts_are_not_saturated(self, make_expense):
        """Test that the peak is floored at one rupee."""
        cells = daily_intensity([make_expense(amount="0.50", date="2024-03-01")], "2024-03")
        assert cells[0].intensity == 0.5
        assert cells[0].level == 3


class TestComparison:
    """Tests for the month-over-month comparison."""

    def test_change_against_previous_month(self, make_expense):
        """Test percentage change and trend, across a year boundary."""
        expenses = [
            make_expense(amount=200, date="2023-12-10"),
            make_expense(amount=300, date="2024-01-05"),
        ]
        comparison = compare_with_previous_month(expenses, "2024-01")
        assert comparison.previous_month == "2023-12"
        assert comparison.change_percentage == Decimal("50.00")
        assert comparison.trend == Trend.UP

    def test_no_previous_spend(self, make_expense):
        """Test that change is undefined without a previous total."""
        comparison = compare_with_previous_month([make_expense(date="2024-03-01")], "2024-03")
        assert comparison.change_percentage is None
        assert comparison.trend == Trend.UP

        empty = compare_with_previous_month([], "2024-03")
        assert empty.trend == Trend.STABLE


class TestMonthlyReport:
    """Tests for the combined report."""

    def test_report_contents(self, march, make_expense):
        """Test that the report gathers every view for the month."""
        other = make_expense(amount=999, date="2024-04-01")
        report = build_monthly_report(
            [*march, other],
            "2024-03",
            thresholds=BudgetThresholds.from_settings(40, 60),
            top_limit=2,
            generated_at=dt.datetime(2024, 4, 1, 9, 30),
        )
        assert report.month == "2024-03"
        assert not report.is_empty
        assert [e.date.day for e in report.expenses] == [3, 2, 1]
        assert len(report.top_expenses) == 2
        assert report.budget.has_budget is False
        assert report.budget.spent == Decimal("350.00")
        assert report.comparison.previous_total == Decimal("0")

    def test_empty_month(self):
        """Test a month with nothing recorded."""
        report = build_monthly_report([], "2024-03")
        assert report.is_empty
        assert report.summary.total == Decimal("0")
