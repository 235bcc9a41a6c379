"""
Action Models - the closed set of things a message can resolve to

Both resolvers produce one of these variants and the orchestrator
dispatches on the variant type, never on a raw string.

The parameter models double as the action contracts for the primary
resolver: they accept the camelCase keys the model is prompted with
(dueDate, targetAmount, ...) as well as snake_case, and reject anything
that breaks an amount invariant.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Intent(str, Enum):
    """Classified action category of a message."""
    ADD_EXPENSE = "add_expense"
    ADD_BILL = "add_bill"
    SET_SAVINGS_GOAL = "set_savings_goal"
    GET_SUMMARY = "get_summary"
    UNKNOWN = "unknown"


# Longest free text accepted from a resolver
NAME_MAX_LENGTH = 100
CATEGORY_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200

_CONTRACT_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    str_strip_whitespace=True,
    extra="ignore",
)


class AddExpense(BaseModel):
    """Record an expense. Missing optional fields are defaulted by the executor."""
    model_config = _CONTRACT_CONFIG

    intent: Literal[Intent.ADD_EXPENSE] = Intent.ADD_EXPENSE
    amount: Decimal = Field(..., gt=0)
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    recurring: Optional[bool] = None


class AddBill(BaseModel):
    """Record a bill."""
    model_config = _CONTRACT_CONFIG

    intent: Literal[Intent.ADD_BILL] = Intent.ADD_BILL
    amount: Decimal = Field(..., gt=0)
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    recurring: Optional[bool] = None


class SetSavingsGoal(BaseModel):
    """Set a savings goal."""
    model_config = _CONTRACT_CONFIG

    intent: Literal[Intent.SET_SAVINGS_GOAL] = Intent.SET_SAVINGS_GOAL
    target_amount: Decimal = Field(..., gt=0, alias="targetAmount")
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    target_date: Optional[date] = Field(default=None, alias="targetDate")
    monthly_contribution: Optional[Decimal] = Field(
        default=None, ge=0, alias="monthlyContribution"
    )


class GetSummary(BaseModel):
    """Read-only snapshot request."""
    model_config = _CONTRACT_CONFIG

    intent: Literal[Intent.GET_SUMMARY] = Intent.GET_SUMMARY


class Unknown(BaseModel):
    """No supported intent matched. Answered with the help text."""
    model_config = _CONTRACT_CONFIG

    intent: Literal[Intent.UNKNOWN] = Intent.UNKNOWN
    message: str


class Clarification(BaseModel):
    """
    An intent was recognised but a required parameter was absent.

    Answered with a guidance message. Never touches the ledger.
    """
    model_config = _CONTRACT_CONFIG

    intent: Intent
    message: str


ResolvedAction = Union[
    AddExpense,
    AddBill,
    SetSavingsGoal,
    GetSummary,
    Unknown,
    Clarification,
]

# Actions the primary resolver is allowed to name. "unknown" is not one of
# them: an unrecognised name from the model means the model is unusable.
ACTION_CONTRACTS: dict[str, type[BaseModel]] = {
    Intent.ADD_EXPENSE.value: AddExpense,
    Intent.ADD_BILL.value: AddBill,
    Intent.SET_SAVINGS_GOAL.value: SetSavingsGoal,
    Intent.GET_SUMMARY.value: GetSummary,
}


def parse_action(action: str, parameters: Optional[dict]) -> ResolvedAction:
    """
    Validate a named action and its parameters against the contract.

    Raises:
        KeyError: action is not one of the supported names
        pydantic.ValidationError: parameters break the contract
    """
    contract = ACTION_CONTRACTS[action]
    params = dict(parameters or {})
    # The intent tag comes from the action name, never from the parameters.
    params.pop("intent", None)
    return contract.model_validate(params)
