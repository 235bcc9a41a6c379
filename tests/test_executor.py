"""
Tests for the action executor.

Amounts must be stored exactly, and nothing may be written when an
amount invariant fails.
"""

from datetime import date
from decimal import Decimal

import pytest

from finagent.actions import ActionExecutor, ActionValidationError
from finagent.models.actions import AddBill, AddExpense, SetSavingsGoal
from finagent.services.storage import (
    BILLS_KEY,
    EXPENSES_KEY,
    SAVINGS_GOALS_KEY,
    LedgerRepository,
)

from conftest import FIXED_NOW, run_async, sequential_ids


@pytest.fixture
def repository(store):
    run_async(LedgerRepository(store).initialize())
    store.puts.clear()
    return LedgerRepository(store)


@pytest.fixture
def executor(repository, audit_logger, clock):
    return ActionExecutor(
        repository,
        audit_logger=audit_logger,
        clock=clock,
        id_factory=sequential_ids(),
    )


class TestAddExpense:

    def test_records_exact_amount(self, executor, repository, store):
        message, expense = run_async(executor.add_expense(
            AddExpense(amount=Decimal("50"), category="groceries", description="$50 on groceries")
        ))

        assert message == "Added expense: $50 for groceries - $50 on groceries"
        assert expense.id == "id-1"
        assert expense.date == FIXED_NOW
        assert store.puts == [EXPENSES_KEY]

        stored = run_async(repository.list_expenses())
        assert stored == [expense]
        assert stored[0].amount == Decimal("50")

    def test_fills_defaults(self, executor):
        _, expense = run_async(executor.add_expense(AddExpense(amount=Decimal("7.25"))))
        assert expense.category == "general"
        assert expense.description == "Expense of $7.25"
        assert expense.recurring is False

    def test_rejects_non_positive_amount_without_writing(self, executor, store):
        # model_construct skips validation, as a buggy resolver might
        action = AddExpense.model_construct(amount=Decimal("-5"))
        with pytest.raises(ActionValidationError):
            run_async(executor.add_expense(action))
        assert store.puts == []

    def test_audits_the_write(self, executor, audit_logger):
        run_async(executor.add_expense(AddExpense(amount=Decimal("10"))))
        events = audit_logger.recent_events()
        assert events[-1].event_type.value == "expense_added"
        assert events[-1].entity_id == "id-1"


class TestAddBill:

    def test_records_bill(self, executor, repository):
        message, bill = run_async(executor.add_bill(AddBill(
            amount=Decimal("1200"),
            name="Rent",
            due_date=date(2024, 1, 1),
            category="rent",
        )))

        assert message == "Added bill: Rent - $1200 due 2024-01-01"
        assert bill.recurring is True
        assert run_async(repository.list_bills()) == [bill]

    def test_fills_defaults(self, executor):
        _, bill = run_async(executor.add_bill(AddBill(amount=Decimal("80"))))
        assert bill.name == "Bill"
        assert bill.category == "utilities"
        assert bill.due_date == date(2024, 7, 15)

    def test_explicit_non_recurring(self, executor):
        _, bill = run_async(executor.add_bill(
            AddBill(amount=Decimal("80"), recurring=False)
        ))
        assert bill.recurring is False

    def test_rejects_zero_amount(self, executor, store):
        with pytest.raises(ActionValidationError):
            run_async(executor.add_bill(AddBill.model_construct(amount=Decimal("0"))))
        assert BILLS_KEY not in store.puts


class TestSetSavingsGoal:

    def test_records_goal(self, executor, repository):
        message, goal = run_async(executor.set_savings_goal(SetSavingsGoal(
            target_amount=Decimal("6000"),
            name="Vacation Fund",
            target_date=date(2025, 1, 1),
            monthly_contribution=Decimal("500"),
        )))

        assert message == "Set savings goal: Vacation Fund - $6000 by 2025-01-01"
        assert goal.current_amount == Decimal("0")
        assert run_async(repository.list_savings_goals()) == [goal]

    def test_derives_monthly_contribution(self, executor):
        _, goal = run_async(executor.set_savings_goal(
            SetSavingsGoal(target_amount=Decimal("1000"))
        ))
        assert goal.monthly_contribution == Decimal("84")
        assert goal.name == "Savings Goal"
        assert goal.target_date == date(2025, 6, 15)

    def test_keeps_explicit_zero_contribution(self, executor):
        _, goal = run_async(executor.set_savings_goal(SetSavingsGoal(
            target_amount=Decimal("1000"),
            monthly_contribution=Decimal("0"),
        )))
        assert goal.monthly_contribution == Decimal("0")

    def test_rejects_negative_target(self, executor, store):
        action = SetSavingsGoal.model_construct(target_amount=Decimal("-1"))
        with pytest.raises(ActionValidationError):
            run_async(executor.set_savings_goal(action))
        assert SAVINGS_GOALS_KEY not in store.puts
