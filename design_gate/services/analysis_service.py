"""Service layer tying classification, optimization and admission together."""

from typing import Iterable, List, Optional, Sequence

from design_gate.core.batch.classifier import (
    BatchClassifier,
    BatchItem,
    coerce_design_file,
)
from design_gate.core.constants import MAX_BATCH_SIZE, SUPPORTED_MIME_TYPES
from design_gate.core.exceptions import AdmissionRejectedError, ValidationError
from design_gate.core.intelligence.classifier import DesignClassifier
from design_gate.core.monitoring.history import MetricsHistory
from design_gate.core.optimization.print_optimizer import PrintOptimizer
from design_gate.models.design import DesignClassification, DesignReport
from design_gate.utils.formatting import is_supported_mime_type, normalize_mime_type
from design_gate.utils.logging import LoggingContext, get_logger

logger = get_logger(__name__)


class DesignAnalysisService:
    """Entry point used by the upload layer for design analysis."""

    def __init__(
        self,
        history: MetricsHistory,
        classifier: Optional[DesignClassifier] = None,
        optimizer: Optional[PrintOptimizer] = None,
        max_batch_size: int = MAX_BATCH_SIZE,
        enforce_admission: bool = False,
        supported_mime_types: Optional[Iterable[str]] = None,
    ):
        """Initialize the analysis service.

        Args:
            history: Shared metrics history providing the admission signal
            classifier: Design classifier, a default one is created if omitted
            optimizer: Print optimizer, a default one is created if omitted
            max_batch_size: Largest batch accepted by analyze_batch
            enforce_admission: Refuse batches while the service is unhealthy
            supported_mime_types: Mimetypes accepted without a warning, defaults
                to SUPPORTED_MIME_TYPES when None; an empty list warns for all
        """
        self.history = history
        self.classifier = classifier or DesignClassifier()
        self.optimizer = optimizer or PrintOptimizer()
        self.batch_classifier = BatchClassifier(self.classifier)
        self.max_batch_size = max_batch_size
        self.enforce_admission = enforce_admission
        self.supported_mime_types = set(
            SUPPORTED_MIME_TYPES
            if supported_mime_types is None
            else (normalize_mime_type(m) for m in supported_mime_types)
        )

    def is_accepting_work(self) -> bool:
        return self.history.is_healthy()

    def _report(self, classification: DesignClassification) -> DesignReport:
        return DesignReport(
            classification=classification,
            optimization=self.optimizer.optimize(classification),
        )

    def _warn_unsupported(self, mime_type: str) -> None:
        if not is_supported_mime_type(mime_type, self.supported_mime_types):
            logger.warning("Unsupported mimetype for print", mime_type=mime_type)

    def analyze(
        self, file_name: str, mime_type: str, file_path: Optional[str] = None
    ) -> DesignReport:
        """Classify a single design and attach print recommendations.

        ``file_path`` is accepted for parity with the upload layer; contents
        are never read.
        """
        self._warn_unsupported(mime_type)
        return self._report(self.classifier.classify(file_name, mime_type))

    def _check_admission(self, file_count: int) -> None:
        if file_count > self.max_batch_size:
            raise ValidationError(
                f"Batch of {file_count} files exceeds the limit of {self.max_batch_size}",
                details={
                    "field_name": "files",
                    "field_value": file_count,
                    "constraints": f"<= {self.max_batch_size}",
                },
            )

        if self.enforce_admission and not self.history.is_healthy():
            current = self.history.current()
            raise AdmissionRejectedError(
                "Service is under heavy load, try again later",
                details={
                    "heap_used_mb": round(current.memory_usage.heap_used_mb, 2),
                    "active_connections": current.active_connections,
                    "heap_limit_mb": self.history.heap_limit_mb,
                    "connection_limit": self.history.connection_limit,
                },
            )

    async def analyze_batch(self, files: Sequence[BatchItem]) -> List[DesignReport]:
        """Classify and optimize every file of a multi-file upload.

        Raises:
            ValidationError: If the batch is larger than max_batch_size
            AdmissionRejectedError: If admission is enforced and the service is unhealthy
            InputShapeError: If any element lacks a name or mimetype
        """
        self._check_admission(len(files))

        descriptors = [coerce_design_file(item, i) for i, item in enumerate(files)]
        for descriptor in descriptors:
            self._warn_unsupported(descriptor.mime_type)

        with LoggingContext(batch_size=len(descriptors)):
            classifications = await self.batch_classifier.batch_analyze(descriptors)
            reports = [self._report(c) for c in classifications]

        logger.info("Batch analysis completed", report_count=len(reports))
        return reports
