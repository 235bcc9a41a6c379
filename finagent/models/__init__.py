"""
Data Models Package

All Pydantic models used by the Financial Agent: ledger records, the
derived snapshot, resolved actions and audit events.
"""

from finagent.models.actions import (
    ACTION_CONTRACTS,
    AddBill,
    AddExpense,
    Clarification,
    GetSummary,
    Intent,
    ResolvedAction,
    SetSavingsGoal,
    Unknown,
    parse_action,
)
from finagent.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finagent.models.ledger import (
    Bill,
    ChatResponse,
    Expense,
    FinancialData,
    SavingsGoal,
    Snapshot,
    new_record_id,
    utc_now,
)

__all__ = [
    # Action models
    "ACTION_CONTRACTS",
    "AddBill",
    "AddExpense",
    "Clarification",
    "GetSummary",
    "Intent",
    "ResolvedAction",
    "SetSavingsGoal",
    "Unknown",
    "parse_action",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Ledger models
    "Bill",
    "ChatResponse",
    "Expense",
    "FinancialData",
    "SavingsGoal",
    "Snapshot",
    "new_record_id",
    "utc_now",
]
