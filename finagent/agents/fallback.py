"""
Fallback Resolver

Deterministic keyword classifier used whenever the primary resolver is
unavailable. It must stay correct with no model at all, so everything
here is plain string matching on top of the heuristic extractor.

PRIORITY: keyword groups are checked in a fixed order and the first
match wins. "I spent $20 to save time" is an expense, not a goal.
"""

from datetime import datetime, timedelta
from decimal import ROUND_CEILING, Decimal
from typing import Callable, Optional

from finagent.config.settings import LedgerSettings
from finagent.extraction import (
    extract_amount,
    extract_bill_name,
    extract_category,
    extract_date,
    extract_description,
    extract_goal_name,
)
from finagent.models.actions import (
    DESCRIPTION_MAX_LENGTH,
    AddBill,
    AddExpense,
    Clarification,
    GetSummary,
    Intent,
    ResolvedAction,
    SetSavingsGoal,
    Unknown,
)
from finagent.models.ledger import utc_now


INTENT_KEYWORDS: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.ADD_EXPENSE, ("add expense", "spent", "bought")),
    (Intent.ADD_BILL, ("add bill", "recurring bill", "due")),
    (Intent.SET_SAVINGS_GOAL, ("savings goal", "save", "target")),
    (Intent.GET_SUMMARY, ("summary", "overview", "how much")),
)

HELP_TEXT = (
    'I received: "{message}". I can help you:\n'
    '- Add expenses (e.g., "I spent $50 on groceries")\n'
    '- Add bills (e.g., "Add rent bill of $1200 due 2024-01-01")\n'
    '- Set savings goals (e.g., "Save $5000 for vacation by 2024-12-31")\n'
    '- Get financial summary (e.g., "Show me my financial summary")'
)

EXPENSE_AMOUNT_GUIDANCE = (
    "I couldn't find an amount in your message. "
    "Please try: 'I spent $50 on groceries'"
)
BILL_AMOUNT_GUIDANCE = (
    "I couldn't find an amount in your message. "
    "Please try: 'Add rent bill of $1200 due 2024-01-01'"
)
GOAL_AMOUNT_GUIDANCE = (
    "I couldn't find a target amount in your message. "
    "Please try: 'Save $5000 for vacation by 2024-12-31'"
)


def help_message(message: str) -> str:
    return HELP_TEXT.format(message=message)


def monthly_contribution_for(target_amount: Decimal) -> Decimal:
    """Whole-currency contribution that reaches the target within 12 months."""
    return (target_amount / 12).to_integral_value(rounding=ROUND_CEILING)


def classify_intent(message: str) -> Intent:
    """Keyword intent of a message, by fixed priority."""
    lowered = message.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return Intent.UNKNOWN


class FallbackResolver:
    """
    Keyword intent classifier plus heuristic parameter extraction.

    Produces fully populated actions: every default is filled here so
    the executor receives exactly what will be stored.
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._settings = settings or LedgerSettings()
        self._clock = clock

    def resolve(self, message: str) -> ResolvedAction:
        intent = classify_intent(message)

        if intent == Intent.ADD_EXPENSE:
            return self._resolve_expense(message)
        if intent == Intent.ADD_BILL:
            return self._resolve_bill(message)
        if intent == Intent.SET_SAVINGS_GOAL:
            return self._resolve_goal(message)
        if intent == Intent.GET_SUMMARY:
            return GetSummary()
        return Unknown(message=help_message(message))

    def _amount(self, message: str) -> Optional[Decimal]:
        amount = extract_amount(message)
        # Zero is no amount at all
        if amount is None or amount <= 0:
            return None
        return amount

    def _resolve_expense(self, message: str) -> ResolvedAction:
        amount = self._amount(message)
        if amount is None:
            return Clarification(
                intent=Intent.ADD_EXPENSE,
                message=EXPENSE_AMOUNT_GUIDANCE,
            )

        return AddExpense(
            amount=amount,
            category=extract_category(message) or "general",
            description=(
                extract_description(message) or f"Expense of ${amount}"
            )[:DESCRIPTION_MAX_LENGTH],
            recurring=False,
        )

    def _resolve_bill(self, message: str) -> ResolvedAction:
        amount = self._amount(message)
        if amount is None:
            return Clarification(
                intent=Intent.ADD_BILL,
                message=BILL_AMOUNT_GUIDANCE,
            )

        today = self._clock().date()
        return AddBill(
            amount=amount,
            name=extract_bill_name(message),
            due_date=extract_date(message)
            or today + timedelta(days=self._settings.bill_default_due_days),
            category=extract_category(message) or "utilities",
            recurring=True,
        )

    def _resolve_goal(self, message: str) -> ResolvedAction:
        target_amount = self._amount(message)
        if target_amount is None:
            return Clarification(
                intent=Intent.SET_SAVINGS_GOAL,
                message=GOAL_AMOUNT_GUIDANCE,
            )

        today = self._clock().date()
        return SetSavingsGoal(
            target_amount=target_amount,
            name=extract_goal_name(message),
            target_date=extract_date(message)
            or today + timedelta(days=self._settings.goal_default_horizon_days),
            monthly_contribution=monthly_contribution_for(target_amount),
        )
