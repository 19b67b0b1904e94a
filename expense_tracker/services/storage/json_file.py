"""
JSON File Storage Implementation

Each key is stored as ``<data_dir>/<key>.json``. This is the on-disk
equivalent of browser local storage: one serialized collection per key,
rewritten whole on every mutation.

TRADEOFFS:
- Whole-file rewrites (fine for hundreds to a few thousand records)
- Last writer wins; no locking across processes
- Writes go to a temp file first and are moved into place, so a crash
  mid-write leaves the previous version intact
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_valid_key(key: str) -> bool:
    """Keys become file names, so only plain names are allowed."""
    return bool(_KEY_PATTERN.match(key)) and key not in {".", ".."}


class JsonFileStorage(KeyValueStorageInterface):
    """
    Directory-backed key-value storage.

    The directory is created on first write.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str, error: type[StorageError]) -> Path:
        """Map a key to its file, refusing anything that could escape the directory."""
        if not is_valid_key(key):
            raise error(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key, StorageReadError)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}")

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key, StorageWriteError)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self._data_dir
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}")
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
