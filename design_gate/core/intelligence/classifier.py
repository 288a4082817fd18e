"""Filename/mimetype heuristics for print-design classification.

Classification never looks at file contents. Two ordered rule tables drive
the result:

* ``CATEGORY_RULES`` is evaluated top to bottom against the lower-cased
  filename and the first rule with a matching keyword wins. When nothing
  matches the design is ``general``, 100x100mm, ``medium``.
* ``MIME_COMPLEXITY_RULES`` is evaluated afterwards. Every matching rule is
  applied in order, so the last match decides the complexity.

Rotation and confidence are derived last from the final dimensions.
"""

import unicodedata
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from design_gate.core.constants import (
    CLASSIFICATION_CONFIDENCE,
    CLASSIFICATION_ID_PREFIX,
    DEFAULT_DESIGN_HEIGHT_MM,
    DEFAULT_DESIGN_WIDTH_MM,
    MIME_IMAGE_PREFIX,
    MIME_PDF,
    MIME_SVG,
    ROTATION_ASPECT_THRESHOLD,
)
from design_gate.models.design import Complexity, DesignCategory, DesignClassification
from design_gate.utils.formatting import normalize_mime_type
from design_gate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CategoryRule:
    """Filename keywords mapped to a category with its print size."""

    keywords: Tuple[str, ...]
    category: DesignCategory
    width: float
    height: float
    complexity: Complexity

    def matches(self, lowered_name: str) -> bool:
        return any(keyword in lowered_name for keyword in self.keywords)


@dataclass(frozen=True)
class MimeComplexityRule:
    """Mimetype predicate that overrides the filename-derived complexity."""

    description: str
    predicate: Callable[[str], bool]
    complexity: Complexity


CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(
        ("kartvizit", "business"), DesignCategory.BUSINESS_CARD, 85, 55, Complexity.SIMPLE
    ),
    CategoryRule(("logo",), DesignCategory.LOGO, 120, 80, Complexity.MEDIUM),
    CategoryRule(("etiket", "label"), DesignCategory.LABEL, 60, 40, Complexity.SIMPLE),
    CategoryRule(
        ("broşür", "brochure"), DesignCategory.BROCHURE, 210, 297, Complexity.COMPLEX
    ),
    CategoryRule(("poster",), DesignCategory.POSTER, 420, 594, Complexity.COMPLEX),
)

DEFAULT_CATEGORY_RULE = CategoryRule(
    (),
    DesignCategory.GENERAL,
    DEFAULT_DESIGN_WIDTH_MM,
    DEFAULT_DESIGN_HEIGHT_MM,
    Complexity.MEDIUM,
)

MIME_COMPLEXITY_RULES: Tuple[MimeComplexityRule, ...] = (
    MimeComplexityRule("pdf document", lambda mime: mime == MIME_PDF, Complexity.MEDIUM),
    MimeComplexityRule("svg image", lambda mime: mime == MIME_SVG, Complexity.SIMPLE),
    MimeComplexityRule(
        "raster image",
        lambda mime: mime.startswith(MIME_IMAGE_PREFIX),
        Complexity.SIMPLE,
    ),
)


def generate_classification_id() -> str:
    return f"{CLASSIFICATION_ID_PREFIX}{uuid.uuid4().hex}"


def needs_rotation(width: float, height: float) -> bool:
    """True when the design is more than 40% taller than it is wide."""
    return height > width * ROTATION_ASPECT_THRESHOLD


class DesignClassifier:
    """Maps a (filename, mimetype) pair to design metadata.

    The classifier holds no mutable state, so one instance can be shared by
    any number of concurrent callers.
    """

    def __init__(
        self,
        category_rules: Tuple[CategoryRule, ...] = CATEGORY_RULES,
        mime_rules: Tuple[MimeComplexityRule, ...] = MIME_COMPLEXITY_RULES,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.category_rules = category_rules
        self.mime_rules = mime_rules
        self._id_factory = id_factory or generate_classification_id

    def match_category(self, file_name: str) -> CategoryRule:
        """Return the first category rule matching the filename."""
        # Uploads from macOS arrive decomposed (NFD), keywords are NFC
        lowered = unicodedata.normalize("NFC", file_name).lower()
        for rule in self.category_rules:
            if rule.matches(lowered):
                return rule
        return DEFAULT_CATEGORY_RULE

    def resolve_complexity(self, mime_type: str, complexity: Complexity) -> Complexity:
        """Apply every matching mimetype override in order."""
        normalized = normalize_mime_type(mime_type)
        for rule in self.mime_rules:
            if rule.predicate(normalized):
                complexity = rule.complexity
        return complexity

    def classify(self, file_name: str, mime_type: str) -> DesignClassification:
        """Classify a design by its filename and mimetype.

        Args:
            file_name: Original upload filename
            mime_type: Mimetype reported for the upload

        Returns:
            DesignClassification; unmatched names fall back to ``general``
        """
        rule = self.match_category(file_name)
        complexity = self.resolve_complexity(mime_type, rule.complexity)

        classification = DesignClassification(
            id=self._id_factory(),
            name=file_name,
            width=rule.width,
            height=rule.height,
            category=rule.category,
            complexity=complexity,
            suggested_rotation=needs_rotation(rule.width, rule.height),
            confidence=CLASSIFICATION_CONFIDENCE,
        )

        logger.debug(
            "Design classified",
            classification_id=classification.id,
            category=classification.category.value,
            complexity=classification.complexity.value,
        )
        return classification
