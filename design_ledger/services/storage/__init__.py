"""
Storage Services Package

Provides the abstract document storage interface and its implementations.
Local files are the default backend; Google Sheets is optional.
"""

from typing import Optional

from design_ledger.config import StorageSettings, get_settings
from design_ledger.services.storage.interface import (
    ConnectionError,
    CorruptStateError,
    DuplicateEntryError,
    StateStorageInterface,
    StorageError,
)
from design_ledger.services.storage.local import (
    FileStateStorage,
    InMemoryStateStorage,
)


def create_storage(settings: Optional[StorageSettings] = None) -> StateStorageInterface:
    """Build the storage backend named by LEDGER_STORAGE_BACKEND."""
    settings = settings or get_settings().storage

    if settings.backend == "memory":
        return InMemoryStateStorage()
    if settings.backend == "google_sheets":
        # Imported lazily so gspread is only touched when actually used
        from design_ledger.services.storage.google_sheets import GoogleSheetsStateStorage
        return GoogleSheetsStateStorage()
    return FileStateStorage(settings.data_dir)


__all__ = [
    # Interface
    "StateStorageInterface",
    # Exceptions
    "ConnectionError",
    "CorruptStateError",
    "DuplicateEntryError",
    "StorageError",
    # Implementations
    "FileStateStorage",
    "InMemoryStateStorage",
    "create_storage",
]
