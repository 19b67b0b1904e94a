"""
Collection Store Base

A store owns one collection, held in memory and mirrored to a single
blob in key-value storage.

Loading: the blob is parsed once at construction. A missing, unreadable or
corrupt blob gives an empty collection. Malformed records inside an
otherwise valid array are skipped one by one. Both cases are audited, never
raised.

Saving: every mutation rewrites the whole blob. A failed write is audited
and the in-memory collection keeps the change (no rollback); the
divergence only shows after a restart.
"""

import json
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.services.storage import KeyValueStorageInterface, StorageError


ModelT = TypeVar("ModelT", bound=BaseModel)


class CollectionStore(Generic[ModelT]):
    """Shared load/persist logic for the expense and budget stores."""

    model: type[BaseModel]

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key
        self._audit = audit_logger or AuditLogger()
        self._last_write_ok = True

    @property
    def key(self) -> str:
        return self._key

    @property
    def last_write_ok(self) -> bool:
        """False when the most recent save failed and memory is ahead of storage."""
        return self._last_write_ok

    def _load_records(self) -> list[ModelT]:
        """Read and parse the stored collection, falling back to empty."""
        try:
            raw = self._storage.read(self._key)
        except StorageError as e:
            self._audit.log_storage_read_failed(self._key, str(e))
            return []

        if raw is None or not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            self._audit.log_storage_read_failed(self._key, f"Invalid JSON: {e}")
            return []

        if not isinstance(data, list):
            self._audit.log_storage_read_failed(
                self._key, f"Expected a JSON array, got {type(data).__name__}"
            )
            return []

        records: list[ModelT] = []
        for index, item in enumerate(data):
            try:
                records.append(self.model.model_validate(item))
            except ValidationError as e:
                self._audit.log_record_skipped(self._key, index, str(e))
        return records

    def _persist(self, records: list[ModelT]) -> bool:
        """Serialize and write the full collection. Returns whether the write landed."""
        payload = json.dumps(
            [record.to_storage_dict() for record in records],
            ensure_ascii=False,
        )
        try:
            self._storage.write(self._key, payload)
        except StorageError as e:
            self._audit.log_storage_write_failed(self._key, str(e))
            self._last_write_ok = False
            return False
        self._last_write_ok = True
        return True
