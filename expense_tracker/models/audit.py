"""
Audit Models for Expense Tracker

Every change to the stored collections, every storage failure and every
report export is recorded as an AuditEvent. This provides:
1. Traceability of what happened to the user's data
2. Debugging information when a stored collection turns out corrupt
3. A record of the persistence/memory divergence after a failed write

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Expense store
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_CLEARED = "expenses_cleared"

    # Budget store
    BUDGET_SET = "budget_set"
    BUDGET_DELETED = "budget_deleted"

    # Persistence
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    RECORD_SKIPPED = "record_skipped"

    # Reports
    REPORT_EXPORTED = "report_exported"
    EXPORT_SKIPPED = "export_skipped"

    # Input boundary
    INPUT_REJECTED = "input_rejected"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'report')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Expense id, budget month or storage key"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, amount, category)
        event = AuditEventBuilder.storage_write_failed("expenses", str(exc))
    """

    @staticmethod
    def expense_added(expense_id: str, amount: str, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {category} - ₹{amount}",
            details={"amount": amount, "category": category},
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(expense_id: str, amount: str, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense updated: {category} - ₹{amount}",
            details={"amount": amount, "category": category},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense deleted: {expense_id}",
            is_user_action=True,
        )

    @staticmethod
    def expenses_cleared(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            description=f"All expenses cleared ({count} removed)",
            details={"removed": count},
            is_user_action=True,
        )

    @staticmethod
    def budget_set(month: str, amount: str, replaced: bool) -> AuditEvent:
        action = "updated" if replaced else "set"
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=month,
            description=f"Budget {action} for {month}: ₹{amount}",
            details={"amount": amount, "replaced": replaced},
            is_user_action=True,
        )

    @staticmethod
    def budget_deleted(month: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            entity_id=month,
            description=f"Budget deleted for {month}",
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Could not load '{key}', starting with an empty collection",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not save '{key}'; changes are kept in memory only",
            error_message=error_message,
        )

    @staticmethod
    def record_skipped(key: str, index: int, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Skipped malformed record #{index} in '{key}'",
            details={"index": index},
            error_message=error_message,
        )

    @staticmethod
    def report_exported(month: str, filename: str, page_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            entity_type="report",
            entity_id=month,
            description=f"Report exported: {filename} ({page_count} pages)",
            details={"filename": filename, "page_count": page_count},
            is_user_action=True,
        )

    @staticmethod
    def export_skipped(month: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_SKIPPED,
            entity_type="report",
            entity_id=month,
            description=f"Nothing to export for {month}",
        )

    @staticmethod
    def input_rejected(entity_type: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} input rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
