"""
Abstract Storage Interface

DESIGN DECISION: Stores never touch files directly. They are given a
key-value backend that holds one serialized blob per key.
This allows us to:
1. Keep the on-disk layout (one JSON document per collection) in one place
2. Use in-memory storage for testing
3. Swap the backend without touching store logic

The interface is intentionally tiny - read a blob, write a blob.
Serialization and recovery from bad data are the stores' job.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.audit import AuditEvent


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for blob storage.

    Any backend (JSON files, in-memory, ...) must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Args:
            key: Collection key (e.g. 'expenses')

        Returns:
            The stored text, or None if nothing is stored yet

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Replace the blob stored under a key.

        Args:
            key: Collection key
            value: Serialized collection

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity (e.g., 'expense', 'budget')
            entity_id: Expense id or budget month

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read."""
    pass


class StorageWriteError(StorageError):
    """The backend rejected a write."""
    pass
