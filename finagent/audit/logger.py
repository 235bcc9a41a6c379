"""
Audit Logger

DESIGN DECISION: Every step of message resolution is logged.
This provides:
1. Traceability of which tier answered which message
2. Debugging capability when the model misbehaves
3. A record of every ledger write

The audit logger:
- Is async so it can sit inside the request flow
- Never raises (a logging failure must not fail a chat request)
- Supports correlation IDs to trace the events of one request
- Keeps the most recent events in memory for inspection
"""

from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finagent.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured log and to a bounded in-memory history.
    """

    def __init__(self, history_size: int = 500):
        self._logger = structlog.get_logger("finagent.audit")
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written to the log.
        """
        self._history.append(event)

        try:
            log_dict = event.to_log_dict()
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False

        return True

    def recent_events(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> list[AuditEvent]:
        """Events still in memory, oldest first, optionally for one request."""
        if correlation_id is None:
            return list(self._history)
        return [e for e in self._history if e.correlation_id == correlation_id]

    async def log_message_received(
        self,
        message: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.message_received(message, correlation_id))

    async def log_primary_resolved(
        self,
        intent: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.primary_resolved(intent, correlation_id))

    async def log_primary_unavailable(
        self,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.primary_unavailable(reason, correlation_id))

    async def log_fallback_resolved(
        self,
        intent: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.fallback_resolved(intent, correlation_id))

    async def log_expense_added(
        self,
        expense_id: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_bill_added(
        self,
        bill_id: str,
        name: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.bill_added(
            bill_id=bill_id,
            name=name,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_savings_goal_set(
        self,
        goal_id: str,
        name: str,
        target_amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.savings_goal_set(
            goal_id=goal_id,
            name=name,
            target_amount=target_amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_summary_computed(
        self,
        summary: dict,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.summary_computed(summary, correlation_id))

    async def log_clarification_requested(
        self,
        intent: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.clarification_requested(intent, correlation_id))

    async def log_action_rejected(
        self,
        intent: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.action_rejected(intent, reason, correlation_id))

    async def log_ledger_initialized(self, ledger_name: str) -> None:
        await self.log(AuditEventBuilder.ledger_initialized(ledger_name))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a chat request and pass it through
    every step of that request.
    """
    return uuid4()
