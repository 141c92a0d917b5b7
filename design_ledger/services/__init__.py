"""Services package."""

from design_ledger.services.storage import (
    ConnectionError,
    CorruptStateError,
    DuplicateEntryError,
    FileStateStorage,
    InMemoryStateStorage,
    StateStorageInterface,
    StorageError,
    create_storage,
)

__all__ = [
    "ConnectionError",
    "CorruptStateError",
    "DuplicateEntryError",
    "FileStateStorage",
    "InMemoryStateStorage",
    "StateStorageInterface",
    "StorageError",
    "create_storage",
]
