# Process health monitoring and admission signal

from .history import MetricsHistory
from .metrics import (
    CacheSizeProvider,
    MemoryUsage,
    MetricsSampler,
    MetricsSnapshot,
    NullCache,
)
from .scheduler import PeriodicSampler

__all__ = [
    "CacheSizeProvider",
    "MemoryUsage",
    "MetricsHistory",
    "MetricsSampler",
    "MetricsSnapshot",
    "NullCache",
    "PeriodicSampler",
]
