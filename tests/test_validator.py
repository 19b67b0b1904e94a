"""Tests for form input validation."""

import datetime as dt
from decimal import Decimal

import pytest

from expense_tracker.config import AppSettings
from expense_tracker.models import AuditEventType, ExpenseCategory, PaidBy, PaymentMethod
from expense_tracker.validation import (
    BudgetInputValidator,
    ExpenseInputValidator,
    get_user_friendly_summary,
)


@pytest.fixture
def validator(audit_logger):
    return ExpenseInputValidator(AppSettings(max_expense_amount_inr=50000), audit_logger)


def _form(**overrides):
    values = {
        "amount": "250",
        "description": "Vegetables",
        "category": "Food",
        "date": "2024-03-05",
        "paid_by": "",
        "payment_method": "UPI",
    }
    values.update(overrides)
    return values


class TestExpenseInputValidator:
    """Tests for ExpenseInputValidator."""

    def test_valid_form_builds_expense(self, validator):
        """Test that a clean form yields an Expense."""
        result = validator.validate(_form())
        assert result.is_valid
        assert result.issues == []
        expense = result.expense
        assert expense.amount == Decimal("250.00")
        assert expense.date == dt.date(2024, 3, 5)
        assert expense.category == ExpenseCategory.FOOD
        assert expense.paid_by is None
        assert expense.payment_method == PaymentMethod.UPI
        assert expense.id

    def test_accepts_enum_and_date_objects(self, validator):
        """Test values straight from UI widgets."""
        result = validator.validate(_form(
            amount=99.5, date=dt.date(2024, 1, 1), category=ExpenseCategory.TRAVEL,
            paid_by=PaidBy.FAMILY,
        ))
        assert result.is_valid
        assert result.expense.paid_by == PaidBy.FAMILY

    def test_edit_keeps_id(self, validator):
        """Test that the given id is used for edits."""
        assert validator.validate(_form(), expense_id="1700000000000").expense.id == "1700000000000"

    @pytest.mark.parametrize("amount", [None, "", "   "])
    def test_missing_amount(self, validator, amount):
        """Test that amount is required."""
        result = validator.validate(_form(amount=amount))
        assert not result.is_valid
        assert result.expense is None
        assert result.issues[0].field == "amount"
        assert result.issues[0].issue_type == "missing"

    @pytest.mark.parametrize("amount", ["0", "-10", "abc"])
    def test_bad_amount(self, validator, amount):
        """Test that amounts must be positive numbers."""
        result = validator.validate(_form(amount=amount))
        assert not result.is_valid
        assert any(issue.field == "amount" for issue in result.issues)

    def test_missing_description(self, validator):
        """Test that description is required."""
        result = validator.validate(_form(description="  "))
        assert not result.is_valid
        assert result.issues[0].field == "description"

    def test_long_description_is_accepted(self, validator):
        """Test that a long description is saved as typed."""
        result = validator.validate(_form(description="x" * 250))
        assert result.is_valid
        assert len(result.expense.description) == 250

    @pytest.mark.parametrize("amount", [1e30, "1" + "0" * 40])
    def test_oversized_amount_is_rejected(self, validator, amount):
        """Test that an amount too large to store is an error, not a crash."""
        result = validator.validate(_form(amount=amount))
        assert not result.is_valid
        assert result.expense is None
        assert result.issues[0].field == "amount"
        assert result.issues[0].issue_type == "invalid_format"

    def test_bad_date_and_category(self, validator):
        """Test that all schema problems are reported together."""
        result = validator.validate(_form(date="05/03/2024", category="Gadgets"))
        assert not result.is_valid
        assert {issue.field for issue in result.issues} == {"date", "category"}

    def test_blank_date_defaults_to_today(self, validator):
        """Test the default date."""
        result = validator.validate(_form(date=None))
        assert result.expense.date == dt.date.today()

    def test_large_amount_warns_but_passes(self, validator):
        """Test the sanity warning for unusually large amounts."""
        result = validator.validate(_form(amount="75000"))
        assert result.is_valid
        assert result.issues[0].severity == "warning"
        assert result.issues[0].issue_type == "suspicious_value"

    def test_future_date_warns_but_passes(self, validator):
        """Test the future date warning."""
        tomorrow = dt.date.today() + dt.timedelta(days=1)
        result = validator.validate(_form(date=tomorrow.isoformat()))
        assert result.is_valid
        assert result.issues[0].issue_type == "future_date"

    def test_rejection_is_audited(self, validator, audit_storage):
        """Test that rejected input leaves an audit trail."""
        validator.validate(_form(amount=""))
        event = audit_storage.get_recent_events()[0]
        assert event.event_type == AuditEventType.INPUT_REJECTED
        assert event.entity_type == "expense"


class TestBudgetInputValidator:
    """Tests for BudgetInputValidator."""

    def test_valid_budget(self):
        """Test a clean budget form."""
        result = BudgetInputValidator().validate("2024-03", "15000")
        assert result.is_valid
        assert result.budget.month == "2024-03"
        assert result.budget.amount == Decimal("15000.00")

    @pytest.mark.parametrize("month, amount, field", [
        ("", "100", "month"),
        ("2024-3", "100", "month"),
        ("2024-03", "", "amount"),
        ("2024-03", "0", "amount"),
        ("2024-03", "lots", "amount"),
    ])
    def test_invalid_budget(self, month, amount, field):
        """Test each way a budget form can be wrong."""
        result = BudgetInputValidator().validate(month, amount)
        assert not result.is_valid
        assert result.budget is None
        assert result.issues[0].field == field


class TestUserFriendlySummary:
    """Tests for the form message rendering."""

    def test_all_good(self, validator):
        """Test the clean summary."""
        assert get_user_friendly_summary(validator.validate(_form())) == "✅ All good!"

    def test_errors_and_fixes(self, validator):
        """Test errors are listed with their suggested fix."""
        summary = get_user_friendly_summary(validator.validate(_form(date="soon")))
        assert summary.startswith("❌ Please fix the following:")
        assert "Use the format YYYY-MM-DD" in summary

    def test_warnings(self, validator):
        """Test warnings are listed separately."""
        summary = get_user_friendly_summary(validator.validate(_form(amount="99999")))
        assert summary.startswith("⚠️ Please double-check:")
