"""
Storage Services Package

Provides the key-value storage interface and its implementations.
Collections are persisted as JSON files, or kept in memory for tests.
"""

from expense_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_file import JsonFileStorage
from expense_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryStorage",
    "JsonFileStorage",
]
