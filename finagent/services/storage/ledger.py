"""
Ledger Repository

Typed access to the three ledger collections on top of a LedgerStore.

Appends are read-append-write. They are only safe because every request
against one ledger runs inside that ledger's actor (see orchestrator);
this class does no locking of its own.
"""

from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from finagent.models.ledger import Bill, Expense, SavingsGoal
from finagent.services.storage.interface import (
    BILLS_KEY,
    COLLECTION_KEYS,
    EXPENSES_KEY,
    SAVINGS_GOALS_KEY,
    TABLES_INITIALIZED_KEY,
    LedgerStore,
    StorageError,
)


logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class LedgerRepository:
    """
    The ledger: expenses, bills and savings goals for one subject.

    The store passed in is the only source of truth; nothing is cached here.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    async def initialize(self) -> bool:
        """
        Create the three collections once per ledger lifetime.

        Returns True if this call created them, False if they already existed.
        Collections are written before the marker, so a failure part way
        through is retried on the next call instead of leaving the marker
        set over missing collections.
        """
        if await self._store.get(TABLES_INITIALIZED_KEY):
            return False

        for key in COLLECTION_KEYS:
            await self._store.put(key, [])
        await self._store.put(TABLES_INITIALIZED_KEY, True)
        return True

    async def _read_raw(self, key: str) -> list:
        value = await self._store.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise StorageError(f"Expected a list under {key}, got {type(value).__name__}")
        return value

    async def _read(self, key: str, model: type[RecordT]) -> list[RecordT]:
        records = []
        for raw in await self._read_raw(key):
            try:
                records.append(model.model_validate(raw))
            except ValidationError as e:
                # Skip malformed rows rather than failing the whole read
                logger.warning(
                    "ledger_record_skipped",
                    collection=key,
                    error=str(e),
                )
        return records

    async def _append(self, key: str, record: BaseModel) -> None:
        rows = await self._read_raw(key)
        rows.append(record.model_dump(mode="json"))
        await self._store.put(key, rows)

    async def list_expenses(self) -> list[Expense]:
        return await self._read(EXPENSES_KEY, Expense)

    async def list_bills(self) -> list[Bill]:
        return await self._read(BILLS_KEY, Bill)

    async def list_savings_goals(self) -> list[SavingsGoal]:
        return await self._read(SAVINGS_GOALS_KEY, SavingsGoal)

    async def append_expense(self, expense: Expense) -> None:
        await self._append(EXPENSES_KEY, expense)

    async def append_bill(self, bill: Bill) -> None:
        await self._append(BILLS_KEY, bill)

    async def append_savings_goal(self, goal: SavingsGoal) -> None:
        await self._append(SAVINGS_GOALS_KEY, goal)

