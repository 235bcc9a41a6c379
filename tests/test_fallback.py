"""
Tests for the keyword fallback resolver.

The fallback must answer every message sensibly with no model at all.
"""

from datetime import date
from decimal import Decimal

import pytest

from finagent.agents import FallbackResolver
from finagent.agents.fallback import (
    BILL_AMOUNT_GUIDANCE,
    EXPENSE_AMOUNT_GUIDANCE,
    GOAL_AMOUNT_GUIDANCE,
    classify_intent,
    help_message,
    monthly_contribution_for,
)
from finagent.models.actions import (
    AddBill,
    AddExpense,
    Clarification,
    GetSummary,
    Intent,
    SetSavingsGoal,
    Unknown,
)


@pytest.fixture
def resolver(clock):
    return FallbackResolver(clock=clock)


class TestClassifyIntent:

    @pytest.mark.parametrize(
        "message,intent",
        [
            ("I spent $50 on groceries", Intent.ADD_EXPENSE),
            ("Bought a coffee for 4.50", Intent.ADD_EXPENSE),
            ("Add rent bill of $1200 due 2024-01-01", Intent.ADD_BILL),
            ("Save $6000 for vacation", Intent.SET_SAVINGS_GOAL),
            ("Show me my financial summary", Intent.GET_SUMMARY),
            ("how much have I got?", Intent.GET_SUMMARY),
            ("hello", Intent.UNKNOWN),
        ],
    )
    def test_keywords(self, message, intent):
        assert classify_intent(message) == intent

    def test_expense_wins_over_goal(self):
        """Test that the first keyword group in priority order wins."""
        assert classify_intent("I spent $20 to save time") == Intent.ADD_EXPENSE

    def test_bill_wins_over_summary(self):
        assert classify_intent("how much is due on the water bill") == Intent.ADD_BILL


class TestResolveExpense:

    def test_full_expense(self, resolver):
        action = resolver.resolve("I spent $50 on groceries")
        assert isinstance(action, AddExpense)
        assert action.amount == Decimal("50")
        assert action.category == "groceries"
        assert action.description == "$50 on groceries"
        assert action.recurring is False

    def test_defaults(self, resolver):
        action = resolver.resolve("spent 12.50")
        assert isinstance(action, AddExpense)
        assert action.category == "general"
        assert action.description == "12.50"

    def test_default_description_uses_amount(self, resolver):
        action = resolver.resolve("add expense 30")
        assert isinstance(action, AddExpense)
        assert action.description == "Expense of $30"

    def test_missing_amount_asks_for_one(self, resolver):
        action = resolver.resolve("I bought stuff")
        assert isinstance(action, Clarification)
        assert action.intent == Intent.ADD_EXPENSE
        assert action.message == EXPENSE_AMOUNT_GUIDANCE

    def test_zero_amount_is_no_amount(self, resolver):
        action = resolver.resolve("I spent $0 on nothing")
        assert isinstance(action, Clarification)

    def test_long_description_is_clipped(self, resolver):
        action = resolver.resolve("I spent $5 on " + "a" * 300)
        assert isinstance(action, AddExpense)
        assert len(action.description) == 200


class TestResolveBill:

    def test_full_bill(self, resolver):
        action = resolver.resolve("Add rent bill of $1200 due 2024-01-01")
        assert isinstance(action, AddBill)
        assert action.name == "Rent"
        assert action.amount == Decimal("1200")
        assert action.due_date == date(2024, 1, 1)
        assert action.category == "rent"
        assert action.recurring is True

    def test_defaults(self, resolver):
        action = resolver.resolve("add bill $45")
        assert isinstance(action, AddBill)
        assert action.name == "Bill"
        assert action.category == "utilities"
        # FIXED_NOW is 2024-06-15, default due date is 30 days out
        assert action.due_date == date(2024, 7, 15)

    def test_missing_amount(self, resolver):
        action = resolver.resolve("add bill for internet")
        assert isinstance(action, Clarification)
        assert action.message == BILL_AMOUNT_GUIDANCE


class TestResolveGoal:

    def test_full_goal(self, resolver):
        action = resolver.resolve("Save $6000 for vacation by 2025-01-01")
        assert isinstance(action, SetSavingsGoal)
        assert action.name == "Vacation Fund"
        assert action.target_amount == Decimal("6000")
        assert action.target_date == date(2025, 1, 1)
        assert action.monthly_contribution == Decimal("500")

    def test_defaults(self, resolver):
        action = resolver.resolve("savings goal 1000")
        assert isinstance(action, SetSavingsGoal)
        assert action.name == "Savings Goal"
        assert action.target_date == date(2025, 6, 15)
        assert action.monthly_contribution == Decimal("84")

    def test_missing_amount(self, resolver):
        action = resolver.resolve("I want to save for a house")
        assert isinstance(action, Clarification)
        assert action.intent == Intent.SET_SAVINGS_GOAL
        assert action.message == GOAL_AMOUNT_GUIDANCE


class TestOtherIntents:

    def test_summary(self, resolver):
        assert isinstance(resolver.resolve("Give me an overview"), GetSummary)

    def test_unknown_echoes_message(self, resolver):
        action = resolver.resolve("what's the weather")
        assert isinstance(action, Unknown)
        assert action.message == help_message("what's the weather")
        assert action.message.startswith('I received: "what\'s the weather".')


class TestMonthlyContribution:

    @pytest.mark.parametrize(
        "target,monthly",
        [
            (Decimal("6000"), Decimal("500")),
            (Decimal("1000"), Decimal("84")),
            (Decimal("12"), Decimal("1")),
            (Decimal("0.50"), Decimal("1")),
        ],
    )
    def test_rounds_up_to_whole_currency(self, target, monthly):
        assert monthly_contribution_for(target) == monthly
