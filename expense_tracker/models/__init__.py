"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

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
from expense_tracker.models.report import (
    BudgetEvaluation,
    BudgetStatus,
    CategoryShare,
    CategorySummary,
    DailySummary,
    DayIntensity,
    GroupSummary,
    MonthlyReport,
    PeriodComparison,
    PeriodSummary,
    Trend,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Budget",
    "Expense",
    "ExpenseCategory",
    "PaidBy",
    "PaymentMethod",
    "ValidationIssue",
    "ValidationResult",
    "new_expense_id",
    "to_money",
    # Report models
    "BudgetEvaluation",
    "BudgetStatus",
    "CategoryShare",
    "CategorySummary",
    "DailySummary",
    "DayIntensity",
    "GroupSummary",
    "MonthlyReport",
    "PeriodComparison",
    "PeriodSummary",
    "Trend",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
