"""Tests for the key-value storage backends."""

import pytest

from expense_tracker.models import AuditEventBuilder
from expense_tracker.services.storage import (
    InMemoryAuditStorage,
    InMemoryStorage,
    JsonFileStorage,
    StorageReadError,
    StorageWriteError,
)


class TestJsonFileStorage:
    """Tests for the directory-backed storage."""

    def test_missing_key_reads_none(self, tmp_path):
        """Test that an absent key is not an error."""
        storage = JsonFileStorage(tmp_path / "data")
        assert storage.read("expenses") is None

    def test_write_then_read(self, tmp_path):
        """Test that a written blob reads back unchanged and creates the directory."""
        storage = JsonFileStorage(tmp_path / "data")
        storage.write("expenses", '[{"description": "Chai ☕"}]')
        assert (tmp_path / "data" / "expenses.json").exists()
        assert storage.read("expenses") == '[{"description": "Chai ☕"}]'

    def test_write_replaces_whole_blob(self, tmp_path):
        """Test that a second write replaces the first and leaves no temp files."""
        storage = JsonFileStorage(tmp_path)
        storage.write("budgets", "[1, 2, 3]")
        storage.write("budgets", "[]")
        assert storage.read("budgets") == "[]"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["budgets.json"]

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", ".."])
    def test_rejects_unsafe_keys(self, tmp_path, key):
        """Test that keys cannot point outside the data directory."""
        storage = JsonFileStorage(tmp_path)
        with pytest.raises(StorageReadError):
            storage.read(key)
        with pytest.raises(StorageWriteError):
            storage.write(key, "[]")
        assert list(tmp_path.iterdir()) == []

    def test_unreadable_file_raises_read_error(self, tmp_path):
        """Test that a key that is a directory surfaces as StorageReadError."""
        (tmp_path / "expenses.json").mkdir()
        with pytest.raises(StorageReadError):
            JsonFileStorage(tmp_path).read("expenses")

    def test_unwritable_location_raises_write_error(self, tmp_path):
        """Test that a data_dir that is a file surfaces as StorageWriteError."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        with pytest.raises(StorageWriteError):
            JsonFileStorage(blocker).write("expenses", "[]")


class TestInMemoryStorage:
    """Tests for the dictionary-backed storage."""

    def test_round_trip(self):
        """Test the basic key-value contract."""
        storage = InMemoryStorage({"budgets": "[]"})
        assert storage.read("budgets") == "[]"
        assert storage.read("expenses") is None
        storage.write("expenses", "[1]")
        assert storage.read("expenses") == "[1]"


class TestInMemoryAuditStorage:
    """Tests for the bounded audit log."""

    def test_recent_events_newest_first(self):
        """Test ordering of recent events."""
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.expense_deleted("a"))
        storage.append_event(AuditEventBuilder.expense_deleted("b"))
        recent = storage.get_recent_events(limit=1)
        assert [e.entity_id for e in recent] == ["b"]

    def test_bounded(self):
        """Test that the oldest events fall off."""
        storage = InMemoryAuditStorage(max_events=2)
        for expense_id in ("a", "b", "c"):
            storage.append_event(AuditEventBuilder.expense_deleted(expense_id))
        assert len(storage) == 2
        assert storage.get_events_by_entity("expense", "a") == []
        assert len(storage.get_events_by_entity("expense", "c")) == 1
