"""
Shared fixtures for the Financial Agent tests

Test strategy:
1. Unit tests for the pure pieces (extractor, fallback, models)
2. Flow tests with an in-memory store and fake completion clients
3. No real API calls in tests
"""

import asyncio
import itertools
from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from finagent.agents import CompletionClient
from finagent.audit import AuditLogger
from finagent.orchestrator import create_ledger_actor
from finagent.services.storage import InMemoryLedgerStore, StorageError


FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


class FakeCompletionClient(CompletionClient):
    """Returns a canned reply, or raises a canned error."""

    def __init__(self, reply: Any = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system_instruction: str, message: str) -> Any:
        self.calls.append((system_instruction, message))
        if self.error is not None:
            raise self.error
        return self.reply


class SlowCompletionClient(CompletionClient):
    """Never answers within any sane timeout."""

    async def complete(self, system_instruction: str, message: str) -> Any:
        await asyncio.sleep(10)
        return "{}"


class RecordingStore(InMemoryLedgerStore):
    """In-memory store that remembers every put."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.puts: list[str] = []

    async def put(self, key, value):
        self.puts.append(key)
        return await super().put(key, value)


class BrokenStore(InMemoryLedgerStore):
    """Store whose every call fails."""

    async def get(self, key):
        raise StorageError("store offline")

    async def put(self, key, value):
        raise StorageError("store offline")


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def make_actor(clock, audit_logger):
    """Build a ledger actor around a store and an optional completion client."""

    def factory(store, completion_client=None, timeout_seconds=None, name="test-ledger"):
        return create_ledger_actor(
            name=name,
            store=store,
            completion_client=completion_client,
            timeout_seconds=timeout_seconds,
            audit_logger=audit_logger,
            clock=clock,
            id_factory=sequential_ids(),
        )

    return factory
