"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from backend.formflow.catalog.forms import FormCatalog
from backend.formflow.db.inmemory import InMemoryDocumentStore, InMemoryLocalCache
from backend.formflow.drafts.manager import DraftManager
from backend.formflow.drafts.persistence import DraftPersistence
from backend.formflow.submissions.finalizer import SubmissionFinalizer
from backend.formflow.validation.recorder import ValidationRecorder


class StepClock:
    """Deterministic clock advancing by a fixed step on every call."""

    def __init__(self, start: datetime | None = None, step_ms: int = 1000) -> None:
        self.current = start or datetime(2025, 1, 15, 9, 0, tzinfo=UTC)
        self.step = timedelta(milliseconds=step_ms)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def cache() -> InMemoryLocalCache:
    return InMemoryLocalCache()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest_asyncio.fixture
async def persistence(
    cache: InMemoryLocalCache, store: InMemoryDocumentStore
) -> AsyncGenerator[DraftPersistence, None]:
    """Two-tier persistence whose mirror is drained after each test."""
    adapter = DraftPersistence(cache, store)
    yield adapter
    await adapter.mirror.drain()


@pytest.fixture
def finalizer(store: InMemoryDocumentStore, clock: StepClock) -> SubmissionFinalizer:
    return SubmissionFinalizer(store, clock=clock)


@pytest.fixture
def manager(
    persistence: DraftPersistence, finalizer: SubmissionFinalizer, clock: StepClock
) -> DraftManager:
    return DraftManager(persistence, finalizer, clock=clock)


@pytest.fixture
def catalog() -> FormCatalog:
    return FormCatalog()


@pytest.fixture
def recorder(
    store: InMemoryDocumentStore, cache: InMemoryLocalCache, clock: StepClock
) -> ValidationRecorder:
    return ValidationRecorder(store, cache, clock=clock)
