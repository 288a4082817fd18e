from .design import (
    Complexity,
    DesignCategory,
    DesignClassification,
    DesignFile,
    DesignReport,
    OptimizationResult,
    PrintDimensions,
)

__all__ = [
    "Complexity",
    "DesignCategory",
    "DesignClassification",
    "DesignFile",
    "DesignReport",
    "OptimizationResult",
    "PrintDimensions",
]
