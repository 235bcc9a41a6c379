"""
Abstract Ledger Store Interface

DESIGN DECISION: The ledger is persisted through a deliberately tiny
async key-value interface. This allows us to:
1. Keep Google Sheets (or anything else) behind the same two calls
2. Use an in-memory store for testing
3. Keep every business rule out of the storage layer

Values are plain JSON-compatible data (dicts, lists, strings, booleans).
Typed access to the collections lives in LedgerRepository.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


# Keys the ledger uses in the store
TABLES_INITIALIZED_KEY = "tables_initialized"
EXPENSES_KEY = "expenses"
BILLS_KEY = "bills"
SAVINGS_GOALS_KEY = "savings_goals"

COLLECTION_KEYS = (EXPENSES_KEY, BILLS_KEY, SAVINGS_GOALS_KEY)


class LedgerStore(ABC):
    """
    Abstract interface for the ledger's key-value substrate.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Read the value stored under key.

        Returns:
            The stored value, or None if the key is absent

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: Any) -> bool:
        """
        Store value under key, replacing any previous value.

        Returns:
            True once the write is acknowledged

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
