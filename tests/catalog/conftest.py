"""Shared fixtures for catalog core tests."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from catalogsvc.catalog.service import CatalogService
from catalogsvc.catalog.store import InMemoryRecordStore


class StepClock:
    """UTC clock advancing one second per reading."""

    def __init__(self) -> None:
        self.current = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


class ManualClock:
    """Monotonic clock moved explicitly by tests."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Create an empty in-memory store."""
    return InMemoryRecordStore()


@pytest.fixture
def slow_store() -> InMemoryRecordStore:
    """Create an in-memory store whose operations suspend briefly."""
    return InMemoryRecordStore(latency=0.01)


@pytest.fixture
def service(store: InMemoryRecordStore) -> CatalogService:
    """Create a service over the in-memory store."""
    return CatalogService(store, clock=StepClock())


@pytest.fixture
def manual_clock() -> Callable[[], float]:
    """Create a manually driven monotonic clock."""
    return ManualClock()


@pytest.fixture
def slow_service(slow_store: InMemoryRecordStore) -> CatalogService:
    """Create a service over the slow in-memory store."""
    return CatalogService(slow_store, clock=StepClock())
