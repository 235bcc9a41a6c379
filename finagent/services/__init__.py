"""Services package."""

from finagent.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerRepository,
    LedgerStore,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsLedgerStore",
    "InMemoryLedgerStore",
    "LedgerRepository",
    "LedgerStore",
    "StorageError",
]
