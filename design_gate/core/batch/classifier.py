"""Concurrent classification of multi-file uploads."""

import asyncio
from collections.abc import Mapping
from typing import Any, List, Sequence, Union

import pydantic

from design_gate.core.exceptions import InputShapeError
from design_gate.core.intelligence.classifier import DesignClassifier
from design_gate.models.design import DesignClassification, DesignFile
from design_gate.utils.logging import get_logger

logger = get_logger(__name__)

BatchItem = Union[DesignFile, Mapping]


def coerce_design_file(item: Any, index: int) -> DesignFile:
    """Validate one batch element into a DesignFile.

    Raises:
        InputShapeError: If the element is not a descriptor or lacks a field
    """
    if isinstance(item, DesignFile):
        return item

    if not isinstance(item, Mapping):
        raise InputShapeError(
            f"Batch element {index} is not a file descriptor",
            details={"index": index, "received_type": type(item).__name__},
        )

    try:
        return DesignFile.model_validate(dict(item))
    except pydantic.ValidationError as e:
        first_error = e.errors()[0]
        field_name = ".".join(str(part) for part in first_error["loc"]) or "unknown"
        raise InputShapeError(
            f"Batch element {index} has an invalid '{field_name}' field",
            details={"index": index, "field_name": field_name},
        ) from e


class BatchClassifier:
    """Fans the design classifier out over a batch of file descriptors.

    Every element is validated before any classification starts, so a
    malformed element fails the whole batch and nothing partial is
    returned. Results are gathered by index and always line up with the
    input order. Classification itself never raises.
    """

    def __init__(self, classifier: DesignClassifier):
        self.classifier = classifier

    async def _classify_one(self, file: DesignFile) -> DesignClassification:
        return self.classifier.classify(file.name, file.mime_type)

    async def batch_analyze(
        self, files: Sequence[BatchItem]
    ) -> List[DesignClassification]:
        descriptors = [coerce_design_file(item, i) for i, item in enumerate(files)]
        if not descriptors:
            return []

        logger.info("Batch analyzing designs", file_count=len(descriptors))

        results = await asyncio.gather(
            *(self._classify_one(descriptor) for descriptor in descriptors)
        )
        return list(results)
