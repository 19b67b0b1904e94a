"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Expense entry (form → validate → store)
2. Budgets (form → validate → upsert)
3. Reports (month → aggregate → evaluate → PDF)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No input reaches a store without passing validation
- Reports are computed from the store contents, never cached
- Every mutation is audited (the stores do this themselves)

The UI only talks to these flows, never to the stores' storage.
"""

from dataclasses import dataclass
from typing import Any, Optional

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.budgets import BudgetThresholds, category_shares
from expense_tracker.config import Settings, get_settings
from expense_tracker.models import (
    CategoryShare,
    DayIntensity,
    DailySummary,
    MonthlyReport,
    ValidationResult,
)
from expense_tracker.periods import current_month
from expense_tracker.reports import (
    ExportedReport,
    PdfReportExporter,
    ReportExportError,
    available_months,
    build_monthly_report,
    daily_intensity,
    recent_daily_trend,
)
from expense_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
)
from expense_tracker.stores import BudgetStore, ExpenseSortKey, ExpenseStore
from expense_tracker.validation import BudgetInputValidator, ExpenseInputValidator


class ExpenseFlow:
    """
    Orchestrates expense entry and editing.

    Flow:
    1. Form values → ExpenseInputValidator
    2. Invalid → return the result (messages for the form), store untouched
    3. Valid → add / update in the ExpenseStore
    """

    def __init__(
        self,
        store: ExpenseStore,
        validator: Optional[ExpenseInputValidator] = None,
    ):
        self._store = store
        self._validator = validator or ExpenseInputValidator()

    @property
    def store(self) -> ExpenseStore:
        return self._store

    def add_expense(self, values: dict[str, Any]) -> ValidationResult:
        """Validate form values and append the expense if they pass."""
        result = self._validator.validate(values)
        if result.is_valid:
            self._store.add(result.expense)
        return result

    def edit_expense(self, expense_id: str, values: dict[str, Any]) -> ValidationResult:
        """
        Validate new values for an existing expense and replace it.

        The id is kept. If the expense has disappeared in the meantime
        the result is returned valid but nothing is written.
        """
        result = self._validator.validate(values, expense_id=expense_id)
        if result.is_valid:
            self._store.update(result.expense)
        return result

    def delete_expense(self, expense_id: str) -> bool:
        return self._store.delete(expense_id)

    def clear_all(self) -> int:
        return self._store.clear()

    def list_expenses(
        self,
        category=None,
        search: str = "",
        sort_key: ExpenseSortKey = ExpenseSortKey.DATE,
    ) -> list:
        """Filtered and sorted view for the expense list."""
        return self._store.sorted_by(sort_key, self._store.filter(category, search))


class BudgetFlow:
    """Orchestrates setting and removing monthly budgets."""

    def __init__(
        self,
        store: BudgetStore,
        validator: Optional[BudgetInputValidator] = None,
    ):
        self._store = store
        self._validator = validator or BudgetInputValidator()

    @property
    def store(self) -> BudgetStore:
        return self._store

    def set_budget(self, month: Any, amount: Any) -> ValidationResult:
        """Validate and upsert the budget for ``month``."""
        result = self._validator.validate(month, amount)
        if result.is_valid:
            self._store.set(result.budget)
        return result

    def delete_budget(self, month: str) -> bool:
        return self._store.delete(month)


class ReportFlow:
    """
    Orchestrates the monthly views and PDF export.

    Every call recomputes from the current store contents.
    """

    def __init__(
        self,
        expense_store: ExpenseStore,
        budget_store: BudgetStore,
        exporter: PdfReportExporter,
        settings: Optional[Settings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._expenses = expense_store
        self._budgets = budget_store
        self._exporter = exporter
        self._app = (settings or get_settings()).app
        self._thresholds = BudgetThresholds.from_settings(
            self._app.budget_safe_threshold,
            self._app.budget_warning_threshold,
        )
        self._audit = audit_logger or AuditLogger()

    def months(self) -> list[str]:
        """Months offered by the report picker (always includes the current one)."""
        return available_months(self._expenses.all(), include_current=True)

    def monthly_report(self, month: Optional[str] = None) -> MonthlyReport:
        month = month or current_month()
        return build_monthly_report(
            self._expenses.all(),
            month,
            budget=self._budgets.get(month),
            thresholds=self._thresholds,
            top_limit=self._app.top_expenses_limit,
        )

    def daily_trend(self, report: MonthlyReport) -> list[DailySummary]:
        return recent_daily_trend(report.daily, self._app.daily_trend_days)

    def heatmap(self, month: str) -> list[DayIntensity]:
        return daily_intensity(self._expenses.all(), month)

    def category_shares(self, month: str) -> list[CategoryShare]:
        return category_shares(self._expenses.by_month(month))

    def export_pdf(self, month: Optional[str] = None) -> Optional[ExportedReport]:
        """
        Build and render the month's PDF.

        Returns None when there is nothing to export or the render failed;
        failures are audited.
        """
        report = self.monthly_report(month)
        try:
            return self._exporter.export(report)
        except ReportExportError as e:
            self._audit.log_error(
                error_type="report_export",
                error_message=str(e),
                details={"month": report.month},
            )
            return None


@dataclass
class AppComponents:
    """Everything the UI needs, wired against one storage backend."""
    settings: Settings
    audit_logger: AuditLogger
    expense_flow: ExpenseFlow
    budget_flow: BudgetFlow
    report_flow: ReportFlow


def create_storage(settings: Settings) -> KeyValueStorageInterface:
    """JSON files when a data directory is configured, memory otherwise."""
    app = settings.app
    if app.uses_file_storage:
        return JsonFileStorage(app.data_dir)
    return InMemoryStorage()


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Defaults to the cached environment settings
        storage: Override the key-value backend (tests pass InMemoryStorage)
    """
    settings = settings or get_settings()
    app = settings.app
    configure_logging("DEBUG" if app.debug_mode else app.log_level)

    if storage is None:
        storage = create_storage(settings)
    audit_logger = AuditLogger(InMemoryAuditStorage())

    expense_store = ExpenseStore(storage, audit_logger, key=app.expenses_key)
    budget_store = BudgetStore(storage, audit_logger, key=app.budgets_key)
    exporter = PdfReportExporter(app, settings.report, audit_logger)

    return AppComponents(
        settings=settings,
        audit_logger=audit_logger,
        expense_flow=ExpenseFlow(expense_store, ExpenseInputValidator(app, audit_logger)),
        budget_flow=BudgetFlow(budget_store, BudgetInputValidator(audit_logger)),
        report_flow=ReportFlow(expense_store, budget_store, exporter, settings, audit_logger),
    )
