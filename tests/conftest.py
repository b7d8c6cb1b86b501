"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import itertools

import pytest

from ragsync.stores.memory import InMemoryRecordStore, InMemoryVectorStore


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class TickingClock:
    """Deterministic clock: every reading is one second after the previous."""

    def __init__(self, start: float = 1_000.0) -> None:
        self._ticks = itertools.count(start)

    def __call__(self) -> float:
        return float(next(self._ticks))


@pytest.fixture()
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore("test", clock=TickingClock())


@pytest.fixture()
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()
