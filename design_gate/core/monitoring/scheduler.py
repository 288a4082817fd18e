"""Recurring metrics sampling."""

import asyncio
from typing import Callable, Optional

from design_gate.core.constants import MONITORING_INTERVAL_SECONDS
from design_gate.core.exceptions import MetricsUnavailableError, ValidationError
from design_gate.core.monitoring.history import MetricsHistory
from design_gate.core.monitoring.metrics import MetricsSampler, MetricsSnapshot
from design_gate.utils.logging import get_logger

logger = get_logger(__name__)


class PeriodicSampler:
    """
    Keeps a MetricsHistory current by sampling on a fixed interval.

    The connection count comes from ``connection_counter``, which the route
    layer provides. Any failure in a cycle, including one raised by the
    counter itself, skips that cycle and leaves the history untouched; the
    next cycle tries again.
    """

    def __init__(
        self,
        sampler: MetricsSampler,
        history: MetricsHistory,
        connection_counter: Callable[[], int],
        interval: float = MONITORING_INTERVAL_SECONDS,
    ):
        self.sampler = sampler
        self.history = history
        self.connection_counter = connection_counter
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> Optional[MetricsSnapshot]:
        """Run one sampling cycle; returns None when metrics were unavailable.

        Errors other than unavailable metrics or an invalid count propagate to
        the caller; the background loop logs them and keeps going.
        """
        try:
            snapshot = self.sampler.sample(self.connection_counter())
        except (MetricsUnavailableError, ValidationError) as e:
            logger.error(
                "Skipping metrics sample", error_code=e.error_code, error=e.message
            )
            return None

        self.history.record(snapshot)
        return snapshot

    async def _run(self) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Metrics sampling cycle failed")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start sampling on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Periodic metrics sampling started", interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Periodic metrics sampling stopped")
