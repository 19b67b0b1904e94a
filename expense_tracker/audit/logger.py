"""
Audit Logger

DESIGN DECISION: Every change to the user's data is logged.
This provides:
1. Traceability of adds, edits, deletes and budget changes
2. A visible record when a stored collection could not be read or saved
3. Debugging capability

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Always writes to the structured local log
- Optionally keeps events in an audit storage backend for the Settings page
"""

import logging
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the structured log to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, if configured (for the in-app history)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for audit events.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("expense_tracker.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_expense_added(self, expense_id: str, amount: str, category: str) -> None:
        """Log a new expense."""
        self.log(AuditEventBuilder.expense_added(expense_id, amount, category))

    def log_expense_updated(self, expense_id: str, amount: str, category: str) -> None:
        """Log an expense edit."""
        self.log(AuditEventBuilder.expense_updated(expense_id, amount, category))

    def log_expense_deleted(self, expense_id: str) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id))

    def log_expenses_cleared(self, count: int) -> None:
        self.log(AuditEventBuilder.expenses_cleared(count))

    def log_budget_set(self, month: str, amount: str, replaced: bool) -> None:
        """Log a budget insert or replacement."""
        self.log(AuditEventBuilder.budget_set(month, amount, replaced))

    def log_budget_deleted(self, month: str) -> None:
        self.log(AuditEventBuilder.budget_deleted(month))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        """Log a collection that could not be loaded."""
        self.log(AuditEventBuilder.storage_read_failed(key, error_message))

    def log_storage_write_failed(self, key: str, error_message: str) -> None:
        """Log a collection that could not be saved."""
        self.log(AuditEventBuilder.storage_write_failed(key, error_message))

    def log_record_skipped(self, key: str, index: int, error_message: str) -> None:
        self.log(AuditEventBuilder.record_skipped(key, index, error_message))

    def log_report_exported(self, month: str, filename: str, page_count: int) -> None:
        self.log(AuditEventBuilder.report_exported(month, filename, page_count))

    def log_export_skipped(self, month: str) -> None:
        self.log(AuditEventBuilder.export_skipped(month))

    def log_input_rejected(self, entity_type: str, issues: list[dict]) -> None:
        """Log form input that failed validation."""
        self.log(AuditEventBuilder.input_rejected(entity_type, issues))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
