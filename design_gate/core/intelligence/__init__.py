"""Heuristic design classification."""

from .classifier import (
    CATEGORY_RULES,
    MIME_COMPLEXITY_RULES,
    CategoryRule,
    DesignClassifier,
    MimeComplexityRule,
    needs_rotation,
)

__all__ = [
    "CATEGORY_RULES",
    "MIME_COMPLEXITY_RULES",
    "CategoryRule",
    "DesignClassifier",
    "MimeComplexityRule",
    "needs_rotation",
]
