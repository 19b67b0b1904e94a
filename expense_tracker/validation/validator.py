"""
Input Validation Boundary

DESIGN DECISION: Form input is validated before it can reach a store.
Invalid input never enters the data model; the user sees the messages
and corrects the form.

Validation runs in two stages:

STAGE 1 - SCHEMA VALIDATION:
- Required fields present (amount, description)
- Amount parses as a number, date parses as YYYY-MM-DD
- Category / paid-by / payment method are known values

STAGE 2 - SEMANTIC VALIDATION:
- Amount must be positive
- Unusually large amounts and future dates raise warnings

Warnings never block; errors always do.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.config import AppSettings
from expense_tracker.formatting import format_inr
from expense_tracker.models.expense import (
    Budget,
    Expense,
    ExpenseCategory,
    PaidBy,
    PaymentMethod,
    ValidationIssue,
    ValidationResult,
    new_expense_id,
    to_money,
)
from expense_tracker.periods import parse_month


def _error(field: str, issue_type: str, message: str, fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
        suggested_fix=fix,
    )


def _warning(field: str, issue_type: str, message: str, fix: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="warning",
        suggested_fix=fix,
    )


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_amount(value: Any, field: str, issues: list[ValidationIssue]) -> Optional[Decimal]:
    if _is_blank(value):
        issues.append(_error(field, "missing", "Please enter an amount", "Enter the amount you spent"))
        return None
    try:
        return to_money(value)
    except ValueError:
        issues.append(_error(field, "invalid_format", f"'{value}' is not a valid amount"))
        return None


def _parse_enum(enum_cls, value: Any, field: str, issues: list[ValidationIssue]):
    if _is_blank(value):
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        issues.append(_error(field, "invalid_value", f"Unknown {field.replace('_', ' ')}: {value}",
                             f"Choose one of: {allowed}"))
        return None


class ExpenseInputValidator:
    """
    Validates raw expense form values.

    ``validate`` returns a ValidationResult; when it is valid,
    ``result.expense`` holds the Expense ready for the store.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or AppSettings()
        self._audit = audit_logger

    def _validate_schema(
        self,
        values: dict[str, Any],
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        """
        Stage 1: presence and format.

        Returns: (parsed_values, list_of_issues)
        """
        issues: list[ValidationIssue] = []
        parsed: dict[str, Any] = {}

        parsed["amount"] = _parse_amount(values.get("amount"), "amount", issues)

        description = values.get("description")
        if _is_blank(description):
            issues.append(_error("description", "missing", "Please enter a description",
                                 "Describe what you spent on"))
        else:
            parsed["description"] = str(description).strip()

        raw_date = values.get("date")
        if _is_blank(raw_date):
            parsed["date"] = dt.date.today()
        elif isinstance(raw_date, dt.date):
            parsed["date"] = raw_date
        else:
            try:
                parsed["date"] = dt.date.fromisoformat(str(raw_date).strip())
            except ValueError:
                issues.append(_error("date", "invalid_format", f"'{raw_date}' is not a valid date",
                                     "Use the format YYYY-MM-DD"))

        parsed["category"] = (
            _parse_enum(ExpenseCategory, values.get("category"), "category", issues)
            or ExpenseCategory.FOOD
        )
        parsed["paid_by"] = _parse_enum(PaidBy, values.get("paid_by"), "paid_by", issues)
        parsed["payment_method"] = _parse_enum(
            PaymentMethod, values.get("payment_method"), "payment_method", issues
        )

        return parsed, issues

    def _validate_semantic(self, parsed: dict[str, Any]) -> list[ValidationIssue]:
        """
        Stage 2: business rules.
        """
        issues: list[ValidationIssue] = []

        amount = parsed.get("amount")
        if amount is not None:
            if amount <= 0:
                issues.append(_error("amount", "invalid_value", "Amount must be greater than zero"))
            elif amount > Decimal(str(self._settings.max_expense_amount_inr)):
                issues.append(_warning(
                    "amount", "suspicious_value",
                    f"Amount ({format_inr(amount, symbol=self._settings.currency_symbol)}) seems unusually high",
                    "Please verify this amount is correct",
                ))

        expense_date = parsed.get("date")
        if expense_date is not None:
            latest = dt.date.today() + dt.timedelta(days=self._settings.future_date_tolerance_days)
            if expense_date > latest:
                issues.append(_warning(
                    "date", "future_date",
                    f"Date ({expense_date.isoformat()}) is in the future",
                    "Please verify the date is correct",
                ))

        return issues

    def validate(self, values: dict[str, Any], expense_id: Optional[str] = None) -> ValidationResult:
        """
        Run both stages.

        Args:
            values: Raw form values (amount, description, category, date,
                    paid_by, payment_method)
            expense_id: Id of the expense being edited; a new id is
                        generated when omitted
        """
        parsed, issues = self._validate_schema(values)
        schema_ok = not any(issue.severity == "error" for issue in issues)
        if schema_ok:
            issues.extend(self._validate_semantic(parsed))

        expense = None
        if not any(issue.severity == "error" for issue in issues):
            try:
                expense = Expense(id=expense_id or new_expense_id(), **parsed)
            except ValidationError as e:
                for detail in e.errors():
                    field = ".".join(str(part) for part in detail["loc"]) or "expense"
                    issues.append(_error(field, "invalid_value", detail["msg"]))

        result = ValidationResult(is_valid=expense is not None, issues=issues, expense=expense)
        if not result.is_valid and self._audit:
            self._audit.log_input_rejected("expense", [i.model_dump() for i in issues])
        return result


class BudgetInputValidator:
    """Validates the monthly budget form."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit = audit_logger

    def validate(self, month: Any, amount: Any) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if _is_blank(month):
            issues.append(_error("month", "missing", "Please choose a month"))
        else:
            try:
                parse_month(str(month).strip())
            except ValueError:
                issues.append(_error("month", "invalid_format", f"'{month}' is not a valid month",
                                     "Use the format YYYY-MM"))

        parsed_amount = _parse_amount(amount, "amount", issues)
        if parsed_amount is not None and parsed_amount <= 0:
            issues.append(_error("amount", "invalid_value", "Please enter a valid budget amount",
                                 "The budget must be greater than zero"))

        budget = None
        if not issues:
            budget = Budget(month=str(month).strip(), amount=parsed_amount)

        result = ValidationResult(is_valid=budget is not None, issues=issues, budget=budget)
        if not result.is_valid and self._audit:
            self._audit.log_input_rejected("budget", [i.model_dump() for i in issues])
        return result


def get_user_friendly_summary(result: ValidationResult) -> str:
    """
    Render validation issues as short lines for the form.
    """
    if result.is_valid and not result.issues:
        return "✅ All good!"

    lines = []
    errors = [i for i in result.issues if i.severity == "error"]
    warnings = [i for i in result.issues if i.severity == "warning"]

    if errors:
        lines.append("❌ Please fix the following:")
        for issue in errors:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     💡 {issue.suggested_fix}")

    if warnings:
        if lines:
            lines.append("")
        lines.append("⚠️ Please double-check:")
        for issue in warnings:
            lines.append(f"   • {issue.message}")

    return "\n".join(lines)
