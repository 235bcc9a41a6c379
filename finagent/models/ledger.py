"""
Ledger Data Models for the Financial Agent

These models define the strict schemas for every record the ledger holds
and for the derived snapshot. They are designed to:
1. Enforce the amount invariants at construction time
2. Stay immutable once created
3. Serialize to plain JSON for the key-value store and the HTTP layer

DESIGN DECISION: Money is Decimal everywhere. Stored values are written as
decimal strings (pydantic's JSON mode), so "50" goes in and Decimal("50")
comes back out with no float rounding on the way.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_record_id() -> str:
    """Opaque unique token used as the id of every ledger record."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PERSISTED ENTITIES
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    The date is the creation instant and is never altered afterwards.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        description="Unique expense id"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    category: str = Field(
        default="general",
        description="Free-text category"
    )
    description: str = Field(
        default="",
        description="What the money was spent on"
    )
    recurring: bool = False
    date: datetime = Field(
        default_factory=utc_now,
        description="Creation timestamp (UTC)"
    )


class Bill(BaseModel):
    """A bill or payment reminder."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=new_record_id)
    name: str = Field(
        ...,
        min_length=1,
        description="Name of the bill"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount of the bill"
    )
    due_date: date = Field(
        ...,
        description="Calendar date the bill is due (may be in the past)"
    )
    category: str = "utilities"
    recurring: bool = True


class SavingsGoal(BaseModel):
    """
    A savings target with a timeline.

    current_amount starts at zero; no action increments it yet.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=new_record_id)
    name: str = Field(
        ...,
        min_length=1,
        description="Name of the savings goal"
    )
    target_amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount to reach"
    )
    target_date: date = Field(
        ...,
        description="Date the target should be reached by"
    )
    monthly_contribution: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Planned monthly contribution"
    )
    current_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount saved so far"
    )


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class Snapshot(BaseModel):
    """
    Point-in-time financial totals.

    Never persisted. Recomputed from the ledger on every read.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    monthly_expenses: Decimal = Field(default=Decimal("0"), alias="monthlyExpenses")
    upcoming_bills: Decimal = Field(default=Decimal("0"), alias="upcomingBills")
    total_saved: Decimal = Field(default=Decimal("0"), alias="totalSaved")
    net_worth: Decimal = Field(default=Decimal("0"), alias="netWorth")

    @classmethod
    def from_totals(
        cls,
        monthly_expenses: Decimal,
        upcoming_bills: Decimal,
        total_saved: Decimal,
    ) -> "Snapshot":
        """Build a snapshot, deriving net worth so the identity always holds."""
        return cls(
            monthly_expenses=monthly_expenses,
            upcoming_bills=upcoming_bills,
            total_saved=total_saved,
            net_worth=total_saved - monthly_expenses,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FinancialData(BaseModel):
    """Everything the dashboard needs in one read."""

    expenses: list[Expense] = Field(default_factory=list)
    bills: list[Bill] = Field(default_factory=list)
    savings_goals: list[SavingsGoal] = Field(default_factory=list)
    summary: Snapshot = Field(default_factory=Snapshot)
    timestamp: datetime = Field(default_factory=utc_now)


# =============================================================================
# RESPONSES
# =============================================================================

class ChatResponse(BaseModel):
    """
    The well-formed answer to every chat message.

    data carries the created record or the snapshot when there is one.
    """

    message: str
    data: Optional[Any] = None
    timestamp: datetime = Field(default_factory=utc_now)

    def to_payload(self) -> dict:
        payload = {
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.data is not None:
            if isinstance(self.data, Snapshot):
                payload["data"] = self.data.to_payload()
            elif isinstance(self.data, BaseModel):
                payload["data"] = self.data.model_dump(mode="json")
            else:
                payload["data"] = self.data
        return payload
