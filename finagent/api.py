"""
Transport Boundary

Framework-free handlers for the two HTTP routes. Any web framework can
mount them; each returns (status_code, json_payload).

    POST /chat                {message}  → {message, data?, timestamp}
    GET  /api/financial-data             → {expenses, bills, savingsGoals,
                                            summary, timestamp}

This is the boundary where every failure becomes a well-formed payload.
Nothing raised below this layer reaches the caller.
"""

from datetime import datetime
from typing import Any, Callable, Optional

import structlog

from finagent.audit import AuditLogger, create_correlation_id
from finagent.models.ledger import Snapshot, utc_now
from finagent.orchestrator import LedgerRegistry, create_app_components
from finagent.queries import bill_to_dict
from finagent.services.storage import StorageError


logger = structlog.get_logger(__name__)

APOLOGY_MESSAGE = (
    "Sorry, I encountered an error processing your request. Please try again."
)


class FinancialAgentAPI:
    """Handlers for one ledger of a registry."""

    def __init__(
        self,
        registry: LedgerRegistry,
        ledger_name: str,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._registry = registry
        self._ledger_name = ledger_name
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    async def handle_chat(self, body: Any) -> tuple[int, dict]:
        """POST /chat"""
        if not isinstance(body, dict):
            return 400, {
                "message": "No message provided",
                "timestamp": self._timestamp(),
            }

        message = body.get("message")
        if not isinstance(message, str) or not message.strip():
            return 400, {
                "message": "Message is required",
                "timestamp": self._timestamp(),
            }

        correlation_id = create_correlation_id()
        actor = self._registry.get(self._ledger_name)
        try:
            response, trace = await actor.chat(message, correlation_id)
        except StorageError as e:
            await self._audit_logger.log_storage_error("chat", str(e), correlation_id)
            return 500, {"message": APOLOGY_MESSAGE, "timestamp": self._timestamp()}
        except Exception as e:
            logger.exception("chat_handler_error", correlation_id=str(correlation_id))
            await self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return 500, {"message": APOLOGY_MESSAGE, "timestamp": self._timestamp()}

        logger.info(
            "chat_handled",
            correlation_id=str(correlation_id),
            tier=trace.tier,
            intent=trace.intent.value if trace.intent else None,
        )
        return 200, response.to_payload()

    async def handle_financial_data(self) -> tuple[int, dict]:
        """GET /api/financial-data"""
        actor = self._registry.get(self._ledger_name)
        try:
            data = await actor.financial_data()
        except Exception as e:
            if isinstance(e, StorageError):
                await self._audit_logger.log_storage_error("financial_data", str(e))
            else:
                logger.exception("financial_data_handler_error")
            return 500, {
                "expenses": [],
                "bills": [],
                "savingsGoals": [],
                "summary": Snapshot().to_payload(),
                "timestamp": self._timestamp(),
                "error": "Failed to load financial data",
            }

        return 200, {
            "expenses": [e.model_dump(mode="json") for e in data.expenses],
            "bills": [bill_to_dict(b, data.timestamp) for b in data.bills],
            "savingsGoals": [g.model_dump(mode="json") for g in data.savings_goals],
            "summary": data.summary.to_payload(),
            "timestamp": data.timestamp.isoformat(),
        }


def create_api() -> FinancialAgentAPI:
    """Build the API for the configured default ledger."""
    registry, ledger_name = create_app_components()
    return FinancialAgentAPI(registry, ledger_name)
