"""Tests for the audit logger."""

from expense_tracker.audit import AuditLogger
from expense_tracker.models import AuditEventBuilder, AuditEventType, AuditSeverity
from expense_tracker.services.storage import AuditStorageInterface


class BrokenAuditStorage(AuditStorageInterface):
    """Audit storage that always fails."""

    def append_event(self, event):
        raise RuntimeError("audit backend down")

    def get_events_by_entity(self, entity_type, entity_id):
        return []

    def get_recent_events(self, limit=100):
        return []


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_to_storage(self, audit_logger, audit_storage):
        """Test that events reach the configured storage."""
        audit_logger.log_expense_added("42", "100.00", "Food")
        audit_logger.log_budget_set("2024-03", "5000.00", replaced=False)

        events = audit_storage.get_recent_events()
        assert [e.event_type for e in events] == [
            AuditEventType.BUDGET_SET, AuditEventType.EXPENSE_ADDED
        ]
        assert audit_storage.get_events_by_entity("expense", "42")[0].details["amount"] == "100.00"

    def test_without_storage(self):
        """Test that a local-only logger still accepts events."""
        logger = AuditLogger()
        assert logger.storage is None
        assert logger.log(AuditEventBuilder.expense_deleted("1")) is True

    def test_storage_failure_is_not_raised(self):
        """Test that a failing audit backend never breaks the caller."""
        logger = AuditLogger(BrokenAuditStorage())
        assert logger.log(AuditEventBuilder.expense_deleted("1")) is False

    def test_input_rejected_is_debug(self, audit_logger, audit_storage):
        """Test that rejected form input is recorded quietly."""
        audit_logger.log_input_rejected("budget", [{"field": "month"}])
        event = audit_storage.get_recent_events()[0]
        assert event.severity == AuditSeverity.DEBUG
        assert event.details == {"issues": [{"field": "month"}]}

    def test_log_error(self, audit_logger, audit_storage):
        """Test system errors carry the message and details."""
        audit_logger.log_error("report_export", "boom", details={"month": "2024-03"})
        event = audit_storage.get_recent_events()[0]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "boom"
        assert event.details == {"month": "2024-03"}
