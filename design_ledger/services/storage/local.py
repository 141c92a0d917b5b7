"""
Local Storage Implementations

FileStateStorage plays the role of browser localStorage: one file per key
inside a data directory shared by every process of the same "profile".
Writes go to a temp file first and are moved into place with os.replace,
so a concurrent reader sees either the old or the new document.

InMemoryStateStorage is used by tests and by the "memory" backend.
"""

import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional

from design_ledger.services.storage.interface import (
    StateStorageInterface,
    StorageError,
)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStateStorage(StateStorageInterface):
    """Stores each key as <data_dir>/<key>.json."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def save(self, key: str, document: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(document)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")


class InMemoryStateStorage(StateStorageInterface):
    """Dictionary-backed storage. Shared between stores only if the instance is."""

    def __init__(self):
        self._documents: dict[str, str] = {}
        self._lock = threading.Lock()

    def load(self, key: str) -> Optional[str]:
        with self._lock:
            return self._documents.get(key)

    def save(self, key: str, document: str) -> None:
        with self._lock:
            self._documents[key] = document

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._documents.pop(key, None) is not None
