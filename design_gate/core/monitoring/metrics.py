"""Point-in-time process metrics used for admission decisions."""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import psutil

from design_gate.core.constants import BYTES_PER_MB
from design_gate.core.exceptions import MetricsUnavailableError, ValidationError
from design_gate.utils.formatting import format_file_size
from design_gate.utils.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class CacheSizeProvider(Protocol):
    """Anything that can report how many entries it currently holds."""

    def size(self) -> int: ...


class NullCache:
    """Cache stand-in for processes that run without a file cache."""

    def size(self) -> int:
        return 0


@dataclass(frozen=True)
class MemoryUsage:
    """Process memory breakdown in bytes."""

    heap_used: int
    heap_total: int
    rss: int
    external: int = 0

    @property
    def heap_used_mb(self) -> float:
        return self.heap_used / BYTES_PER_MB

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heap_used": self.heap_used,
            "heap_total": self.heap_total,
            "rss": self.rss,
            "external": self.external,
            "heap_used_mb": round(self.heap_used_mb, 2),
            "rss_human": format_file_size(self.rss),
        }


@dataclass(frozen=True)
class MetricsSnapshot:
    """One timestamped sample of process and service metrics."""

    memory_usage: MemoryUsage
    cpu_usage: float  # Cumulative user CPU seconds
    active_connections: int
    cache_size: int
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "memory_usage": self.memory_usage.to_dict(),
            "cpu_usage": round(self.cpu_usage, 3),
            "active_connections": self.active_connections,
            "cache_size": self.cache_size,
            "timestamp": datetime.fromtimestamp(self.timestamp).isoformat(),
        }


class MetricsSampler:
    """Reads live process counters and the cache size into a snapshot.

    The sampler keeps no history; the only state is the last timestamp,
    used to keep timestamps non-decreasing if the wall clock steps back.
    """

    def __init__(
        self,
        cache: Optional[CacheSizeProvider] = None,
        process: Optional[psutil.Process] = None,
    ):
        self.cache = cache if cache is not None else NullCache()
        self._process = process or psutil.Process()
        self._last_timestamp = 0.0

    def _read_memory(self) -> MemoryUsage:
        info = self._process.memory_info()
        return MemoryUsage(
            heap_used=info.rss,
            heap_total=info.vms,
            rss=info.rss,
            # "shared" is only reported on Linux
            external=getattr(info, "shared", 0),
        )

    def _next_timestamp(self) -> float:
        now = max(time.time(), self._last_timestamp)
        self._last_timestamp = now
        return now

    def sample(self, active_connections: int) -> MetricsSnapshot:
        """Capture a snapshot of the current process state.

        Args:
            active_connections: Open connections reported by the route layer

        Returns:
            A new MetricsSnapshot

        Raises:
            ValidationError: If active_connections is negative
            MetricsUnavailableError: If process metrics or cache size can't be read
        """
        if active_connections < 0:
            raise ValidationError(
                "active_connections cannot be negative",
                details={
                    "field_name": "active_connections",
                    "field_value": active_connections,
                    "constraints": ">= 0",
                },
            )

        try:
            memory = self._read_memory()
            cpu_user = self._process.cpu_times().user
        except (psutil.Error, OSError) as e:
            logger.warning("Process metrics unavailable", error=str(e))
            raise MetricsUnavailableError(
                "Could not read process metrics",
                details={"source": "process", "reason": str(e)},
            ) from e

        try:
            cache_size = int(self.cache.size())
        except Exception as e:
            logger.warning("Cache size unavailable", error=str(e))
            raise MetricsUnavailableError(
                "Could not read cache size",
                details={"source": "cache", "reason": str(e)},
            ) from e

        return MetricsSnapshot(
            memory_usage=memory,
            cpu_usage=float(cpu_user),
            active_connections=active_connections,
            cache_size=cache_size,
            timestamp=self._next_timestamp(),
        )
