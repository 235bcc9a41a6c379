"""
Main Orchestrator for the Financial Agent

This module ties together all the components and defines the
end-to-end flows for:
1. Chat (message → resolve → execute → respond)
2. Dashboard read (ledger → ordered collections + snapshot)

RESOLUTION STATE MACHINE:
    RECEIVED → PRIMARY_ATTEMPTED → RESOLVED ──────────┐
                                └→ FALLBACK_ATTEMPTED ─┴→ EXECUTED → RESPONDED

- The primary resolver is always tried first, exactly once.
- Any primary failure moves to the fallback, exactly once.
- EXECUTED always produces a ChatResponse, even when nothing is written.

CONCURRENCY: every request against a ledger goes through that ledger's
LedgerActor, which runs them one at a time in arrival order. This is what
makes the executor's read-append-write safe. Actors live on one
long-lived event loop (ActorLoop) on a background thread, so callers may
come from any thread and any event loop.
"""

import asyncio
import threading
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from finagent.actions import ActionExecutor, ActionValidationError
from finagent.agents import (
    CompletionClient,
    FallbackResolver,
    GeminiCompletionClient,
    PrimaryResolver,
)
from finagent.audit import AuditLogger, create_correlation_id
from finagent.config import get_settings
from finagent.config.settings import LedgerSettings
from finagent.models.actions import (
    AddBill,
    AddExpense,
    Clarification,
    GetSummary,
    Intent,
    ResolvedAction,
    SetSavingsGoal,
    Unknown,
)
from finagent.models.ledger import ChatResponse, FinancialData, new_record_id, utc_now
from finagent.queries import AggregationEngine
from finagent.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsLedgerStore,
    InMemoryLedgerStore,
    LedgerRepository,
    LedgerStore,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")

SUMMARY_MESSAGE = "Here's your financial summary:"


class ResolutionStage(str, Enum):
    """States of one chat request."""
    RECEIVED = "received"
    PRIMARY_ATTEMPTED = "primary_attempted"
    RESOLVED = "resolved"
    FALLBACK_ATTEMPTED = "fallback_attempted"
    EXECUTED = "executed"
    RESPONDED = "responded"


class ResolutionTrace(BaseModel):
    """Which states a request went through and which tier resolved it."""

    correlation_id: UUID
    stages: list[ResolutionStage] = Field(default_factory=list)
    tier: Optional[str] = None
    intent: Optional[Intent] = None
    fallback_reason: Optional[str] = None

    def enter(self, stage: ResolutionStage) -> None:
        self.stages.append(stage)


class ResolutionOrchestrator:
    """
    Single entry point for chat messages.

    Composes primary resolver → (on failure) fallback resolver → executor.
    """

    def __init__(
        self,
        primary: PrimaryResolver,
        fallback: FallbackResolver,
        executor: ActionExecutor,
        aggregation: AggregationEngine,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._primary = primary
        self._fallback = fallback
        self._executor = executor
        self._aggregation = aggregation
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock

    async def process_message(
        self,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[ChatResponse, ResolutionTrace]:
        """
        Resolve and execute one message.

        Storage failures propagate; the transport boundary turns them
        into an apology.

        Returns:
            (response, trace)
        """
        correlation_id = correlation_id or create_correlation_id()
        trace = ResolutionTrace(correlation_id=correlation_id)

        trace.enter(ResolutionStage.RECEIVED)
        await self._audit_logger.log_message_received(message, correlation_id)

        trace.enter(ResolutionStage.PRIMARY_ATTEMPTED)
        action, reason = await self._primary.resolve(message)

        if action is not None:
            trace.enter(ResolutionStage.RESOLVED)
            trace.tier = "primary"
            await self._audit_logger.log_primary_resolved(
                action.intent.value, correlation_id
            )
        else:
            trace.enter(ResolutionStage.FALLBACK_ATTEMPTED)
            trace.tier = "fallback"
            trace.fallback_reason = reason
            await self._audit_logger.log_primary_unavailable(
                reason or "unknown", correlation_id
            )
            action = self._fallback.resolve(message)
            await self._audit_logger.log_fallback_resolved(
                action.intent.value, correlation_id
            )

        trace.intent = action.intent
        response = await self.execute(action, correlation_id)
        trace.enter(ResolutionStage.EXECUTED)
        trace.enter(ResolutionStage.RESPONDED)
        return response, trace

    async def execute(
        self,
        action: ResolvedAction,
        correlation_id: Optional[UUID] = None,
    ) -> ChatResponse:
        """Dispatch a resolved action. Every variant yields a response."""
        try:
            if isinstance(action, AddExpense):
                message, record = await self._executor.add_expense(action, correlation_id)
                return self._respond(message, record)
            if isinstance(action, AddBill):
                message, record = await self._executor.add_bill(action, correlation_id)
                return self._respond(message, record)
            if isinstance(action, SetSavingsGoal):
                message, record = await self._executor.set_savings_goal(action, correlation_id)
                return self._respond(message, record)
        except ActionValidationError as e:
            await self._audit_logger.log_action_rejected(
                action.intent.value, str(e), correlation_id
            )
            return self._respond(f"I couldn't record that: {e}")

        if isinstance(action, GetSummary):
            snapshot = await self._aggregation.compute_snapshot()
            await self._audit_logger.log_summary_computed(
                snapshot.to_payload(), correlation_id
            )
            return self._respond(SUMMARY_MESSAGE, snapshot)
        if isinstance(action, Clarification):
            await self._audit_logger.log_clarification_requested(
                action.intent.value, correlation_id
            )
            return self._respond(action.message)
        if isinstance(action, Unknown):
            return self._respond(action.message)

        raise TypeError(f"Unhandled action type: {type(action).__name__}")

    def _respond(self, message: str, data=None) -> ChatResponse:
        return ChatResponse(message=message, data=data, timestamp=self._clock())


class ActorLoop:
    """
    One event loop, running forever on a daemon thread, that hosts actors.

    Callers on any thread and any event loop hand coroutines over with
    run(); the coroutines themselves only ever execute on this loop.
    """

    def __init__(self, name: str = "ledger-actors"):
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_forever, name=name, daemon=True)
        self._thread.start()

    def _run_forever(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    async def run(self, coro: Awaitable[T]) -> T:
        """
        Execute coro on the actor loop and wait for its result.

        Cancelling the caller does not cancel coro once it is scheduled.
        """
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return await asyncio.shield(asyncio.wrap_future(future))


@lru_cache()
def get_actor_loop() -> ActorLoop:
    """Process-wide actor loop, started on first use."""
    return ActorLoop()


class LedgerActor:
    """
    Sole owner of one ledger.

    Requests are queued on a FIFO mailbox and executed one at a time in
    arrival order. Nothing else may touch the ledger's repository.
    There is no cancellation: a request that has started runs to the end.
    """

    def __init__(
        self,
        name: str,
        repository: LedgerRepository,
        orchestrator: ResolutionOrchestrator,
        aggregation: AggregationEngine,
        audit_logger: Optional[AuditLogger] = None,
        actor_loop: Optional[ActorLoop] = None,
    ):
        self.name = name
        self._repository = repository
        self._orchestrator = orchestrator
        self._aggregation = aggregation
        self._audit_logger = audit_logger or AuditLogger()
        self._actor_loop = actor_loop or get_actor_loop()
        # Only ever acquired on the actor loop; wakes waiters in arrival order
        self._mailbox = asyncio.Lock()

    async def _serialized(self, operation: Callable[[], Awaitable[T]]) -> T:
        async with self._mailbox:
            return await operation()

    async def submit(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run operation once every earlier request has finished."""
        return await self._actor_loop.run(self._serialized(operation))

    async def _initialize(self) -> None:
        if await self._repository.initialize():
            await self._audit_logger.log_ledger_initialized(self.name)

    async def initialize(self) -> None:
        await self.submit(self._initialize)

    async def chat(
        self,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[ChatResponse, ResolutionTrace]:
        async def run():
            await self._initialize()
            return await self._orchestrator.process_message(message, correlation_id)

        return await self.submit(run)

    async def financial_data(self) -> FinancialData:
        async def run():
            await self._initialize()
            return await self._aggregation.get_financial_data()

        return await self.submit(run)


class LedgerRegistry:
    """
    One actor per ledger name, created on first use.

    Actors for different ledgers share nothing and run concurrently.
    """

    def __init__(self, actor_factory: Callable[[str], LedgerActor]):
        self._actor_factory = actor_factory
        self._actors: dict[str, LedgerActor] = {}
        # get() may be called from several frontend threads at once
        self._lock = threading.Lock()

    def get(self, name: str) -> LedgerActor:
        with self._lock:
            if name not in self._actors:
                self._actors[name] = self._actor_factory(name)
            return self._actors[name]

    def names(self) -> list[str]:
        return list(self._actors)


def create_ledger_actor(
    name: str,
    store: LedgerStore,
    completion_client: Optional[CompletionClient] = None,
    ledger_settings: Optional[LedgerSettings] = None,
    timeout_seconds: Optional[float] = None,
    audit_logger: Optional[AuditLogger] = None,
    clock: Callable[[], datetime] = utc_now,
    id_factory: Callable[[], str] = new_record_id,
    actor_loop: Optional[ActorLoop] = None,
) -> LedgerActor:
    """
    Wire every component of one ledger around an explicit store.

    With no completion client the primary tier is disabled and every
    message is resolved by the fallback.
    """
    ledger_settings = ledger_settings or LedgerSettings()
    audit_logger = audit_logger or AuditLogger()
    repository = LedgerRepository(store)

    aggregation = AggregationEngine(repository, settings=ledger_settings, clock=clock)
    executor = ActionExecutor(
        repository,
        audit_logger=audit_logger,
        settings=ledger_settings,
        clock=clock,
        id_factory=id_factory,
    )
    orchestrator = ResolutionOrchestrator(
        primary=PrimaryResolver(completion_client, timeout_seconds=timeout_seconds),
        fallback=FallbackResolver(settings=ledger_settings, clock=clock),
        executor=executor,
        aggregation=aggregation,
        audit_logger=audit_logger,
        clock=clock,
    )
    return LedgerActor(
        name=name,
        repository=repository,
        orchestrator=orchestrator,
        aggregation=aggregation,
        audit_logger=audit_logger,
        actor_loop=actor_loop,
    )


def _build_store_factory() -> Callable[[str], LedgerStore]:
    """Store per ledger name, following the configured backend."""
    settings = get_settings()

    if settings.app.storage_backend == "google_sheets":
        try:
            sheets_settings = settings.google_sheets
            default_name = settings.ledger.name

            def sheets_store(name: str) -> LedgerStore:
                sheet_name = sheets_settings.ledger_sheet_name
                if name != default_name:
                    sheet_name = f"{sheet_name}-{name}"
                client = GoogleSheetsClient(
                    sheets_settings.model_copy(update={"ledger_sheet_name": sheet_name})
                )
                return GoogleSheetsLedgerStore(client)

            return sheets_store
        except Exception as e:
            # Storage not configured - continue in memory
            logger.warning("storage_not_configured", error=str(e))

    return lambda name: InMemoryLedgerStore()


def create_app_components() -> tuple[LedgerRegistry, str]:
    """
    Factory function to create all application components.

    Returns:
        (registry, default_ledger_name)
    """
    settings = get_settings()
    gemini = settings.gemini
    ledger_settings = settings.ledger
    audit_logger = AuditLogger()
    store_factory = _build_store_factory()

    completion_client = None
    if gemini.enabled:
        try:
            completion_client = GeminiCompletionClient(gemini)
        except Exception as e:
            logger.warning("completion_client_unavailable", error=str(e))

    def actor_factory(name: str) -> LedgerActor:
        return create_ledger_actor(
            name=name,
            store=store_factory(name),
            completion_client=completion_client,
            ledger_settings=ledger_settings,
            timeout_seconds=gemini.timeout_seconds,
            audit_logger=audit_logger,
        )

    return LedgerRegistry(actor_factory), ledger_settings.name
