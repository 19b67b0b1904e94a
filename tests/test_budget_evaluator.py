"""Tests for budget evaluation."""

from decimal import Decimal

import pytest

from expense_tracker.budgets import (
    DEFAULT_THRESHOLDS,
    BudgetThresholds,
    budget_status,
    category_shares,
    evaluate_budget,
)
from expense_tracker.models import Budget, BudgetStatus, ExpenseCategory


class TestBudgetStatus:
    """Tests for the status tiers."""

    @pytest.mark.parametrize("ratio, expected", [
        ("0", BudgetStatus.SAFE),
        ("50", BudgetStatus.SAFE),
        ("50.01", BudgetStatus.WARNING),
        ("80", BudgetStatus.WARNING),
        ("80.01", BudgetStatus.DANGER),
        ("250", BudgetStatus.DANGER),
    ])
    def test_default_boundaries(self, ratio, expected):
        """Test that boundaries are inclusive on the lower tier."""
        assert budget_status(Decimal(ratio)) == expected

    def test_custom_thresholds(self):
        """Test configurable tier boundaries."""
        thresholds = BudgetThresholds.from_settings(30, 60)
        assert budget_status(Decimal("45"), thresholds) == BudgetStatus.WARNING
        assert budget_status(Decimal("61"), thresholds) == BudgetStatus.DANGER

    def test_thresholds_must_be_ordered(self):
        """Test that safe cannot exceed warning."""
        with pytest.raises(ValueError):
            BudgetThresholds(safe=Decimal(90), warning=Decimal(80))

    def test_status_is_monotonic_in_spend(self):
        """Test that more spend never improves the status."""
        budget = Budget(month="2024-03", amount=1000)
        tiers = list(BudgetStatus)
        ranks = [
            tiers.index(evaluate_budget(Decimal(spent), budget).status)
            for spent in range(0, 2001, 25)
        ]
        assert ranks == sorted(ranks)


class TestEvaluateBudget:
    """Tests for spend-vs-budget evaluation."""

    def test_no_budget_is_distinct(self):
        """Test that a missing budget yields no budget-derived fields."""
        evaluation = evaluate_budget(Decimal("350"), None, month="2024-03")
        assert evaluation.has_budget is False
        assert evaluation.month == "2024-03"
        assert evaluation.spent == Decimal("350")
        assert evaluation.status is None
        assert evaluation.percentage is None
        assert evaluation.remaining is None

    def test_percentage_clamped_ratio_not(self):
        """Test that the display percentage stops at 100 while the ratio does not."""
        evaluation = evaluate_budget(Decimal("350"), Budget(month="2024-03", amount=300))
        assert evaluation.ratio == Decimal("116.67")
        assert evaluation.percentage == Decimal("100.00")
        assert evaluation.is_over_budget is True
        assert evaluation.month == "2024-03"

    def test_exactly_on_budget(self):
        """Test spend equal to the budget."""
        evaluation = evaluate_budget(Decimal("500"), Budget(month="2024-03", amount=500))
        assert evaluation.remaining == Decimal("0.00")
        assert evaluation.is_over_budget is False
        assert evaluation.remaining_label == "remaining"
        assert evaluation.status == BudgetStatus.DANGER

    def test_default_thresholds(self):
        """Test the shipped tier boundaries."""
        assert DEFAULT_THRESHOLDS.safe == Decimal(50)
        assert DEFAULT_THRESHOLDS.warning == Decimal(80)


class TestCategoryShares:
    """Tests for category share of the total."""

    def test_shares(self, make_expense):
        """Test percentages rounded to one decimal, largest first."""
        shares = category_shares([
            make_expense(amount=100, category=ExpenseCategory.FOOD),
            make_expense(amount=200, category=ExpenseCategory.SHOPPING),
            make_expense(amount=0.01, category=ExpenseCategory.OTHER),
        ])
        assert [s.category for s in shares] == [
            ExpenseCategory.SHOPPING, ExpenseCategory.FOOD, ExpenseCategory.OTHER
        ]
        assert shares[0].percentage == Decimal("66.7")
        assert shares[2].percentage == Decimal("0.0")

    def test_empty(self):
        """Test that no spend means no shares."""
        assert category_shares([]) == []
