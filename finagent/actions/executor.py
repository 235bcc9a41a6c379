"""
Action Executor

Turns a resolved action into a ledger record.

Each operation:
1. Re-checks the amount invariant (nothing is written if it fails)
2. Fills any default the resolver left open
3. Assigns a fresh id and stamps creation-time fields
4. Appends the record to its collection
5. Returns a confirmation message and the created record

Appends are read-append-write on the whole collection. Callers must run
inside the ledger's actor; see orchestrator.LedgerActor.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from pydantic import ValidationError

from finagent.agents.fallback import monthly_contribution_for
from finagent.audit import AuditLogger
from finagent.config.settings import LedgerSettings
from finagent.extraction import validate_amount
from finagent.models.actions import AddBill, AddExpense, SetSavingsGoal
from finagent.models.ledger import (
    Bill,
    Expense,
    SavingsGoal,
    new_record_id,
    utc_now,
)
from finagent.services.storage import LedgerRepository


DEFAULT_EXPENSE_CATEGORY = "general"
DEFAULT_BILL_NAME = "Bill"
DEFAULT_BILL_CATEGORY = "utilities"
DEFAULT_GOAL_NAME = "Savings Goal"


class ActionValidationError(Exception):
    """An action reached the executor with parameters that cannot be stored."""
    pass


class ActionExecutor:
    """
    Executes ledger mutations.

    The clock and id factory are injectable so that two runs over the
    same input can produce identical records.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_record_id,
    ):
        self._repository = repository
        self._audit_logger = audit_logger
        self._settings = settings or LedgerSettings()
        self._clock = clock
        self._id_factory = id_factory

    async def add_expense(
        self,
        action: AddExpense,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, Expense]:
        """
        Record an expense.

        Returns:
            (confirmation, expense)
        """
        if not validate_amount(action.amount):
            raise ActionValidationError("Expense amount must be greater than zero")

        try:
            expense = Expense(
                id=self._id_factory(),
                amount=action.amount,
                category=action.category or DEFAULT_EXPENSE_CATEGORY,
                description=action.description or f"Expense of ${action.amount}",
                recurring=bool(action.recurring),
                date=self._clock(),
            )
        except ValidationError as e:
            raise ActionValidationError(f"Invalid expense: {e}")

        await self._repository.append_expense(expense)

        if self._audit_logger:
            await self._audit_logger.log_expense_added(
                expense_id=expense.id,
                amount=str(expense.amount),
                category=expense.category,
                correlation_id=correlation_id,
            )

        message = (
            f"Added expense: ${expense.amount} for {expense.category}"
            f" - {expense.description}"
        )
        return message, expense

    async def add_bill(
        self,
        action: AddBill,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, Bill]:
        """
        Record a bill.

        Returns:
            (confirmation, bill)
        """
        if not validate_amount(action.amount):
            raise ActionValidationError("Bill amount must be greater than zero")

        due_date = action.due_date or (
            self._clock().date() + timedelta(days=self._settings.bill_default_due_days)
        )

        try:
            bill = Bill(
                id=self._id_factory(),
                name=action.name or DEFAULT_BILL_NAME,
                amount=action.amount,
                due_date=due_date,
                category=action.category or DEFAULT_BILL_CATEGORY,
                recurring=True if action.recurring is None else action.recurring,
            )
        except ValidationError as e:
            raise ActionValidationError(f"Invalid bill: {e}")

        await self._repository.append_bill(bill)

        if self._audit_logger:
            await self._audit_logger.log_bill_added(
                bill_id=bill.id,
                name=bill.name,
                amount=str(bill.amount),
                correlation_id=correlation_id,
            )

        message = (
            f"Added bill: {bill.name} - ${bill.amount}"
            f" due {bill.due_date.isoformat()}"
        )
        return message, bill

    async def set_savings_goal(
        self,
        action: SetSavingsGoal,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, SavingsGoal]:
        """
        Record a savings goal. current_amount always starts at zero.

        Returns:
            (confirmation, goal)
        """
        if not validate_amount(action.target_amount):
            raise ActionValidationError("Savings target must be greater than zero")

        target_date = action.target_date or (
            self._clock().date()
            + timedelta(days=self._settings.goal_default_horizon_days)
        )
        monthly = action.monthly_contribution
        if monthly is None:
            monthly = monthly_contribution_for(action.target_amount)

        try:
            goal = SavingsGoal(
                id=self._id_factory(),
                name=action.name or DEFAULT_GOAL_NAME,
                target_amount=action.target_amount,
                target_date=target_date,
                monthly_contribution=monthly,
            )
        except ValidationError as e:
            raise ActionValidationError(f"Invalid savings goal: {e}")

        await self._repository.append_savings_goal(goal)

        if self._audit_logger:
            await self._audit_logger.log_savings_goal_set(
                goal_id=goal.id,
                name=goal.name,
                target_amount=str(goal.target_amount),
                correlation_id=correlation_id,
            )

        message = (
            f"Set savings goal: {goal.name} - ${goal.target_amount}"
            f" by {goal.target_date.isoformat()}"
        )
        return message, goal
