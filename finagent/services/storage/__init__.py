"""
Storage Services Package

Provides the abstract ledger store, its implementations and the typed
ledger repository built on top of it.
"""

from finagent.services.storage.interface import (
    BILLS_KEY,
    COLLECTION_KEYS,
    EXPENSES_KEY,
    SAVINGS_GOALS_KEY,
    TABLES_INITIALIZED_KEY,
    ConnectionError,
    LedgerStore,
    StorageError,
)
from finagent.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
)
from finagent.services.storage.ledger import LedgerRepository
from finagent.services.storage.memory import InMemoryLedgerStore

__all__ = [
    # Keys
    "BILLS_KEY",
    "COLLECTION_KEYS",
    "EXPENSES_KEY",
    "SAVINGS_GOALS_KEY",
    "TABLES_INITIALIZED_KEY",
    # Interfaces
    "LedgerStore",
    "LedgerRepository",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
    "InMemoryLedgerStore",
]
