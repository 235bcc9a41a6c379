"""
Audit Models for the Financial Agent

Every message that reaches the orchestrator leaves a trail of audit
events: which tier resolved it, what was written, what went wrong.
Events sharing a correlation id belong to one request.

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


DESCRIPTION_MAX_LENGTH = 500


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    One per step of the resolution state machine, plus the ledger writes.
    """
    # Resolution
    MESSAGE_RECEIVED = "message_received"
    PRIMARY_RESOLVED = "primary_resolved"
    PRIMARY_UNAVAILABLE = "primary_unavailable"
    FALLBACK_RESOLVED = "fallback_resolved"

    # Execution
    EXPENSE_ADDED = "expense_added"
    BILL_ADDED = "bill_added"
    SAVINGS_GOAL_SET = "savings_goal_set"
    SUMMARY_COMPUTED = "summary_computed"
    CLARIFICATION_REQUESTED = "clarification_requested"
    ACTION_REJECTED = "action_rejected"

    # Ledger
    LEDGER_INITIALIZED = "ledger_initialized"

    # System events
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'bill', 'message')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by every event of one chat request"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def truncate_description(cls, v):
        """Clip overlong descriptions to the column limit."""
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[:DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.message_received(message, correlation_id)
        event = AuditEventBuilder.expense_added(expense_id, "50", "food", correlation_id)
    """

    @staticmethod
    def message_received(
        message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_RECEIVED,
            entity_type="message",
            correlation_id=correlation_id,
            description="Chat message received",
            details={
                "length": len(message),
            },
        )

    @staticmethod
    def primary_resolved(
        intent: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRIMARY_RESOLVED,
            entity_type="message",
            correlation_id=correlation_id,
            description=f"Primary resolver chose {intent}",
            details={
                "intent": intent,
                "tier": "primary",
            },
        )

    @staticmethod
    def primary_unavailable(
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRIMARY_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            entity_type="message",
            correlation_id=correlation_id,
            description="Primary resolver unavailable, falling back",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def fallback_resolved(
        intent: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FALLBACK_RESOLVED,
            entity_type="message",
            correlation_id=correlation_id,
            description=f"Fallback resolver chose {intent}",
            details={
                "intent": intent,
                "tier": "fallback",
            },
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: ${amount} for {category}",
            details={
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def bill_added(
        bill_id: str,
        name: str,
        amount: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_ADDED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill added: {name} - ${amount}",
            details={
                "name": name,
                "amount": amount,
            },
        )

    @staticmethod
    def savings_goal_set(
        goal_id: str,
        name: str,
        target_amount: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVINGS_GOAL_SET,
            entity_type="savings_goal",
            entity_id=goal_id,
            correlation_id=correlation_id,
            description=f"Savings goal set: {name} - ${target_amount}",
            details={
                "name": name,
                "target_amount": target_amount,
            },
        )

    @staticmethod
    def summary_computed(
        summary: dict,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description="Financial snapshot computed",
            details=summary,
        )

    @staticmethod
    def clarification_requested(
        intent: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLARIFICATION_REQUESTED,
            entity_type="message",
            correlation_id=correlation_id,
            description=f"Required parameter missing for {intent}",
            details={
                "intent": intent,
            },
        )

    @staticmethod
    def action_rejected(
        intent: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="message",
            correlation_id=correlation_id,
            description=f"Executor rejected {intent}",
            error_message=reason,
            details={
                "intent": intent,
            },
        )

    @staticmethod
    def ledger_initialized(ledger_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_INITIALIZED,
            entity_type="ledger",
            entity_id=ledger_name,
            description=f"Ledger {ledger_name} initialized",
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Ledger store failed during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
