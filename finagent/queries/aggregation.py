"""
Aggregation Engine

DESIGN DECISION: The snapshot is DERIVED, never stored.
Every read recomputes it from the three collections, so it can never
drift from the ledger.

Windows are inclusive at the boundary:
- an expense dated exactly `monthly_window_days` ago still counts
- a bill due today still counts as upcoming
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional

from finagent.config.settings import LedgerSettings
from finagent.models.ledger import (
    Bill,
    Expense,
    FinancialData,
    SavingsGoal,
    Snapshot,
    utc_now,
)
from finagent.services.storage import LedgerRepository


def _as_utc(moment: datetime) -> datetime:
    # Records written by this package are always aware; older rows may not be
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def summarize(
    expenses: list[Expense],
    bills: list[Bill],
    goals: list[SavingsGoal],
    now: datetime,
    monthly_window_days: int = 30,
) -> Snapshot:
    """Compute the snapshot for the given collections at instant `now`."""
    now = _as_utc(now)
    window_start = now - timedelta(days=monthly_window_days)
    today = now.date()

    monthly_expenses = sum(
        (e.amount for e in expenses if _as_utc(e.date) >= window_start),
        Decimal("0"),
    )
    upcoming_bills = sum(
        (b.amount for b in bills if b.due_date >= today),
        Decimal("0"),
    )
    total_saved = sum(
        (g.current_amount for g in goals),
        Decimal("0"),
    )

    return Snapshot.from_totals(
        monthly_expenses=monthly_expenses,
        upcoming_bills=upcoming_bills,
        total_saved=total_saved,
    )


class AggregationEngine:
    """
    Read side of the ledger.

    Presentation order:
    - expenses newest first, capped at expense_display_limit
    - bills soonest due first
    - goals soonest target first
    The snapshot always covers the full collections, not the capped view.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._repository = repository
        self._settings = settings or LedgerSettings()
        self._clock = clock

    def _present_expenses(self, expenses: list[Expense]) -> list[Expense]:
        ordered = sorted(expenses, key=lambda e: _as_utc(e.date), reverse=True)
        return ordered[:self._settings.expense_display_limit]

    @staticmethod
    def _present_bills(bills: list[Bill]) -> list[Bill]:
        return sorted(bills, key=lambda b: b.due_date)

    @staticmethod
    def _present_goals(goals: list[SavingsGoal]) -> list[SavingsGoal]:
        return sorted(goals, key=lambda g: g.target_date)

    async def get_expenses(self) -> list[Expense]:
        return self._present_expenses(await self._repository.list_expenses())

    async def get_bills(self) -> list[Bill]:
        return self._present_bills(await self._repository.list_bills())

    async def get_savings_goals(self) -> list[SavingsGoal]:
        return self._present_goals(await self._repository.list_savings_goals())

    async def compute_snapshot(self) -> Snapshot:
        """Current totals across the whole ledger."""
        return summarize(
            expenses=await self._repository.list_expenses(),
            bills=await self._repository.list_bills(),
            goals=await self._repository.list_savings_goals(),
            now=self._clock(),
            monthly_window_days=self._settings.monthly_window_days,
        )

    async def get_financial_data(self) -> FinancialData:
        """Ordered collections plus the snapshot, from one read of each collection."""
        now = self._clock()
        expenses = await self._repository.list_expenses()
        bills = await self._repository.list_bills()
        goals = await self._repository.list_savings_goals()

        return FinancialData(
            expenses=self._present_expenses(expenses),
            bills=self._present_bills(bills),
            savings_goals=self._present_goals(goals),
            summary=summarize(
                expenses=expenses,
                bills=bills,
                goals=goals,
                now=now,
                monthly_window_days=self._settings.monthly_window_days,
            ),
            timestamp=now,
        )
