"""Bounded metrics history and the admission signal derived from it."""

from collections import deque
from threading import Lock
from typing import Any, Deque, Dict, Optional, Tuple

from design_gate.core.constants import (
    BYTES_PER_MB,
    HEALTHY_CONNECTION_LIMIT,
    HEALTHY_HEAP_LIMIT_MB,
    METRICS_HISTORY_SIZE,
)
from design_gate.core.exceptions import ValidationError
from design_gate.core.monitoring.metrics import MetricsSnapshot
from design_gate.utils.logging import get_logger

logger = get_logger(__name__)


class MetricsHistory:
    """
    Fixed-capacity, oldest-first buffer of metric snapshots.

    Construct one per service at startup and hand it to whoever samples and
    whoever needs the admission signal. All reads and writes take the same
    lock because the periodic sampler may run on another thread.
    """

    def __init__(
        self,
        max_size: int = METRICS_HISTORY_SIZE,
        heap_limit_mb: float = HEALTHY_HEAP_LIMIT_MB,
        connection_limit: int = HEALTHY_CONNECTION_LIMIT,
    ):
        """
        Initialize the history.

        Args:
            max_size: Number of snapshots to retain
            heap_limit_mb: Heap usage (MB) at or above which the service is unhealthy
            connection_limit: Connection count at or above which the service is unhealthy
        """
        if max_size < 1:
            raise ValidationError(
                "max_size must be at least 1",
                details={"field_name": "max_size", "field_value": max_size},
            )
        self.max_size = max_size
        self.heap_limit_mb = heap_limit_mb
        self.connection_limit = connection_limit
        self._snapshots: Deque[MetricsSnapshot] = deque(maxlen=max_size)
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)

    def record(self, snapshot: MetricsSnapshot) -> None:
        """Append a snapshot, evicting the oldest once capacity is reached."""
        with self._lock:
            self._snapshots.append(snapshot)

    def current(self) -> Optional[MetricsSnapshot]:
        """Most recent snapshot, or None before the first sample."""
        with self._lock:
            return self._snapshots[-1] if self._snapshots else None

    def all(self) -> Tuple[MetricsSnapshot, ...]:
        """All retained snapshots, oldest first."""
        with self._lock:
            return tuple(self._snapshots)

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()

    def evaluate(self, snapshot: MetricsSnapshot) -> bool:
        """Check one snapshot against the heap and connection thresholds."""
        heap_used_mb = snapshot.memory_usage.heap_used / BYTES_PER_MB
        return (
            heap_used_mb < self.heap_limit_mb
            and snapshot.active_connections < self.connection_limit
        )

    def is_healthy(self) -> bool:
        """Admission signal; an empty history counts as healthy."""
        snapshot = self.current()
        if snapshot is None:
            return True

        healthy = self.evaluate(snapshot)
        if not healthy:
            logger.warning(
                "Service health thresholds exceeded",
                heap_used_mb=round(snapshot.memory_usage.heap_used_mb, 2),
                active_connections=snapshot.active_connections,
                heap_limit_mb=self.heap_limit_mb,
                connection_limit=self.connection_limit,
            )
        return healthy

    def summary(self) -> Dict[str, Any]:
        """JSON-ready overview of the retained history."""
        snapshots = self.all()
        if not snapshots:
            return {
                "samples": 0,
                "healthy": True,
                "current": None,
                "peak_heap_used_mb": 0.0,
                "average_connections": 0.0,
                "thresholds": self._thresholds(),
            }

        latest = snapshots[-1]
        return {
            "samples": len(snapshots),
            "healthy": self.evaluate(latest),
            "current": latest.to_dict(),
            "peak_heap_used_mb": round(
                max(s.memory_usage.heap_used_mb for s in snapshots), 2
            ),
            "average_connections": round(
                sum(s.active_connections for s in snapshots) / len(snapshots), 2
            ),
            "thresholds": self._thresholds(),
        }

    def _thresholds(self) -> Dict[str, float]:
        return {
            "heap_limit_mb": self.heap_limit_mb,
            "connection_limit": self.connection_limit,
        }
