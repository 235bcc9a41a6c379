"""Tests for the aggregation engine and presentation helpers."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from finagent.config.settings import LedgerSettings
from finagent.models.ledger import Bill, Expense, SavingsGoal, Snapshot
from finagent.queries import (
    AggregationEngine,
    days_until_due,
    format_currency,
    summarize,
)
from finagent.services.storage import LedgerRepository

from conftest import FIXED_NOW, run_async


def expense(amount, days_ago=0, **kwargs):
    return Expense(amount=Decimal(amount), date=FIXED_NOW - timedelta(days=days_ago), **kwargs)


def bill(amount, due, name="Rent"):
    return Bill(name=name, amount=Decimal(amount), due_date=due)


def goal(target, target_date=date(2025, 1, 1), current="0", name="Goal"):
    return SavingsGoal(
        name=name,
        target_amount=Decimal(target),
        target_date=target_date,
        current_amount=Decimal(current),
    )


class TestSummarize:

    def test_empty_ledger(self):
        snapshot = summarize([], [], [], FIXED_NOW)
        assert snapshot == Snapshot()

    def test_expense_window_is_inclusive(self):
        expenses = [
            expense("10", days_ago=0),
            expense("20", days_ago=30),
            expense("40", days_ago=31),
        ]
        snapshot = summarize(expenses, [], [], FIXED_NOW)
        assert snapshot.monthly_expenses == Decimal("30")

    def test_bill_due_today_is_upcoming(self):
        today = FIXED_NOW.date()
        bills = [
            bill("100", today),
            bill("200", today + timedelta(days=10)),
            bill("1200", date(2024, 1, 1)),
        ]
        snapshot = summarize([], bills, [], FIXED_NOW)
        assert snapshot.upcoming_bills == Decimal("300")

    def test_total_saved_and_net_worth(self):
        snapshot = summarize(
            [expense("80")],
            [],
            [goal("1000", current="120"), goal("500", current="30")],
            FIXED_NOW,
        )
        assert snapshot.total_saved == Decimal("150")
        assert snapshot.net_worth == Decimal("70")

    def test_sums_are_exact(self):
        expenses = [expense("0.10") for _ in range(3)]
        assert summarize(expenses, [], [], FIXED_NOW).monthly_expenses == Decimal("0.30")

    def test_custom_window(self):
        expenses = [expense("5", days_ago=6), expense("5", days_ago=8)]
        snapshot = summarize(expenses, [], [], FIXED_NOW, monthly_window_days=7)
        assert snapshot.monthly_expenses == Decimal("5")


class TestAggregationEngine:

    @pytest.fixture
    def repository(self, store):
        repository = LedgerRepository(store)
        run_async(repository.initialize())
        return repository

    def test_expenses_newest_first_and_capped(self, repository, clock):
        for days_ago in range(55):
            run_async(repository.append_expense(expense("1", days_ago=days_ago)))

        engine = AggregationEngine(repository, clock=clock)
        expenses = run_async(engine.get_expenses())

        assert len(expenses) == 50
        assert expenses[0].date == FIXED_NOW
        assert all(a.date >= b.date for a, b in zip(expenses, expenses[1:]))

    def test_snapshot_covers_more_than_the_display_limit(self, repository, clock):
        for _ in range(5):
            run_async(repository.append_expense(expense("2")))

        settings = LedgerSettings(expense_display_limit=3)
        engine = AggregationEngine(repository, settings=settings, clock=clock)
        data = run_async(engine.get_financial_data())

        assert len(data.expenses) == 3
        assert data.summary.monthly_expenses == Decimal("10")
        assert data.timestamp == FIXED_NOW

    def test_bills_and_goals_ordered_by_date(self, repository, clock):
        run_async(repository.append_bill(bill("1", date(2024, 9, 1), name="Later")))
        run_async(repository.append_bill(bill("1", date(2024, 7, 1), name="Sooner")))
        run_async(repository.append_savings_goal(goal("10", date(2026, 1, 1), name="B")))
        run_async(repository.append_savings_goal(goal("10", date(2025, 1, 1), name="A")))

        engine = AggregationEngine(repository, clock=clock)

        assert [b.name for b in run_async(engine.get_bills())] == ["Sooner", "Later"]
        assert [g.name for g in run_async(engine.get_savings_goals())] == ["A", "B"]

    def test_snapshot_of_empty_ledger(self, repository, clock):
        engine = AggregationEngine(repository, clock=clock)
        assert run_async(engine.compute_snapshot()).to_payload() == {
            "monthlyExpenses": "0",
            "upcomingBills": "0",
            "totalSaved": "0",
            "netWorth": "0",
        }


class TestPresentation:

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("1200"), "$1,200.00"),
            ("50", "$50.00"),
            (0, "$0.00"),
            (Decimal("-5.5"), "-$5.50"),
        ],
    )
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_days_until_due(self):
        today = FIXED_NOW.date()
        assert days_until_due(today, FIXED_NOW) == 0
        assert days_until_due(today + timedelta(days=1), FIXED_NOW) == 1
        assert days_until_due(today - timedelta(days=1), FIXED_NOW) == -1
