"""Pytest fixtures for design-gate tests."""

import itertools
import os
from typing import Callable

import pytest

# Set test environment variables BEFORE any imports
os.environ["DESIGN_GATE_ENV"] = "testing"

from design_gate.core.constants import BYTES_PER_MB
from design_gate.core.intelligence.classifier import DesignClassifier
from design_gate.core.monitoring.history import MetricsHistory
from design_gate.core.monitoring.metrics import MemoryUsage, MetricsSnapshot


class FakeCache:
    """Cache collaborator reporting a fixed size."""

    def __init__(self, entries: int = 0):
        self.entries = entries

    def size(self) -> int:
        return self.entries


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic id factory for classifiers."""
    counter = itertools.count(1)
    return lambda: f"analysis_{next(counter)}"


@pytest.fixture
def classifier(sequential_ids) -> DesignClassifier:
    return DesignClassifier(id_factory=sequential_ids)


@pytest.fixture
def history() -> MetricsHistory:
    return MetricsHistory()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache(entries=7)


@pytest.fixture
def make_snapshot() -> Callable[..., MetricsSnapshot]:
    """Build snapshots with heap usage given in MB."""

    def _make(
        heap_used_mb: float = 128,
        active_connections: int = 0,
        cache_size: int = 0,
        timestamp: float = 1_700_000_000.0,
    ) -> MetricsSnapshot:
        heap_bytes = int(heap_used_mb * BYTES_PER_MB)
        return MetricsSnapshot(
            memory_usage=MemoryUsage(
                heap_used=heap_bytes,
                heap_total=heap_bytes * 2,
                rss=heap_bytes,
                external=0,
            ),
            cpu_usage=1.25,
            active_connections=active_connections,
            cache_size=cache_size,
            timestamp=timestamp,
        )

    return _make
