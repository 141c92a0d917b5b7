"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted as ONE JSON document under ONE key.
The storage interface is therefore a tiny key/value contract, which lets us:
1. Keep the ledger on local disk by default
2. Use in-memory storage for testing
3. Share a copy through Google Sheets
4. Keep the ledger store decoupled from any backend

There are no partial updates: every save replaces the whole document.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StateStorageInterface(ABC):
    """
    Abstract interface for ledger document storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Load the document stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored document, or None if nothing was saved yet

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, key: str, document: str) -> None:
        """
        Replace the document stored under a key.

        Args:
            key: Storage key
            document: Full serialized document

        Raises:
            StorageError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove the document stored under a key.

        Returns:
            True if a document was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptStateError(StorageError):
    """The persisted document exists but cannot be parsed."""
    pass


class DuplicateEntryError(StorageError):
    """Attempted to insert an entry whose id is already taken."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
