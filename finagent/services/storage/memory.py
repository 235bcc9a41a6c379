"""
In-Memory Ledger Store

Dict-backed implementation of LedgerStore. Used by tests and by the
default "memory" storage backend.

Values are deep-copied on the way in and out so callers can never
mutate stored state without going through put().
"""

import copy
from typing import Any, Optional

from finagent.services.storage.interface import LedgerStore


class InMemoryLedgerStore(LedgerStore):
    """Process-local ledger store."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    async def put(self, key: str, value: Any) -> bool:
        self._data[key] = copy.deepcopy(value)
        return True
