"""Service wiring: builds the monitoring and analysis objects from settings."""

from typing import Callable, Optional

from design_gate.config import Settings, settings as default_settings
from design_gate.core.monitoring.history import MetricsHistory
from design_gate.core.monitoring.metrics import CacheSizeProvider, MetricsSampler
from design_gate.core.monitoring.scheduler import PeriodicSampler
from design_gate.services.analysis_service import DesignAnalysisService
from design_gate.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


class DesignGateRuntime:
    """Owns the process-wide monitoring state for one service instance.

    Construct at service start, ``await start()`` once an event loop is
    running and ``await stop()`` on shutdown. Nothing is created at import
    time.
    """

    def __init__(
        self,
        connection_counter: Callable[[], int],
        cache: Optional[CacheSizeProvider] = None,
        settings: Optional[Settings] = None,
        configure_logging: bool = False,
    ):
        self.settings = settings or default_settings
        if configure_logging:
            setup_logging(
                log_level=self.settings.log_level,
                json_logs=self.settings.json_logs,
                enable_file_logging=self.settings.logging_enabled,
                log_dir=self.settings.log_dir,
                max_log_size_mb=self.settings.max_log_size_mb,
                backup_count=self.settings.log_backup_count,
            )

        self.history = MetricsHistory(
            max_size=self.settings.metrics_history_size,
            heap_limit_mb=self.settings.healthy_heap_limit_mb,
            connection_limit=self.settings.healthy_connection_limit,
        )
        self.sampler = MetricsSampler(cache=cache)
        self.periodic_sampler = PeriodicSampler(
            sampler=self.sampler,
            history=self.history,
            connection_counter=connection_counter,
            interval=self.settings.monitoring_interval,
        )
        self.analysis_service = DesignAnalysisService(
            history=self.history,
            max_batch_size=self.settings.max_batch_size,
            enforce_admission=self.settings.enforce_admission,
            supported_mime_types=self.settings.supported_mime_types,
        )

    async def start(self) -> None:
        logger.info("Starting design gate", app_name=self.settings.app_name)
        self.periodic_sampler.start()

    async def stop(self) -> None:
        await self.periodic_sampler.stop()
        logger.info("Design gate stopped", app_name=self.settings.app_name)

    async def __aenter__(self) -> "DesignGateRuntime":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
