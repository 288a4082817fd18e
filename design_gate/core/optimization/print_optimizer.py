"""Print-layout advice for classified designs."""

from typing import List

from design_gate.core.constants import (
    BUSINESS_CARD_HEIGHT_MM,
    BUSINESS_CARD_TOLERANCE_MM,
    BUSINESS_CARD_WIDTH_MM,
)
from design_gate.models.design import (
    Complexity,
    DesignCategory,
    DesignClassification,
    OptimizationResult,
    PrintDimensions,
)

STANDARD_BUSINESS_CARD_MESSAGE = (
    f"Standard business card size is {BUSINESS_CARD_WIDTH_MM}×{BUSINESS_CARD_HEIGHT_MM}mm"
)
ROTATION_MESSAGE = "Consider rotating design for better layout efficiency"
HIGH_RESOLUTION_MESSAGE = "Complex designs may require higher resolution for printing"


class PrintOptimizer:
    """Turns a classification into normalized dimensions and recommendations.

    Rules are independent and all of them may fire; recommendations are
    appended in rule order:

    1. Business cards off the 85x55mm standard by 5mm or more in either
       dimension are snapped to the standard size.
    2. Tall designs get a rotation hint.
    3. Complex designs get a resolution hint.
    """

    def optimize(self, classification: DesignClassification) -> OptimizationResult:
        recommendations: List[str] = []
        width, height = classification.width, classification.height

        if classification.category == DesignCategory.BUSINESS_CARD and (
            abs(width - BUSINESS_CARD_WIDTH_MM) >= BUSINESS_CARD_TOLERANCE_MM
            or abs(height - BUSINESS_CARD_HEIGHT_MM) >= BUSINESS_CARD_TOLERANCE_MM
        ):
            recommendations.append(STANDARD_BUSINESS_CARD_MESSAGE)
            width, height = BUSINESS_CARD_WIDTH_MM, BUSINESS_CARD_HEIGHT_MM

        if classification.suggested_rotation:
            recommendations.append(ROTATION_MESSAGE)

        if classification.complexity == Complexity.COMPLEX:
            recommendations.append(HIGH_RESOLUTION_MESSAGE)

        return OptimizationResult(
            recommendations=tuple(recommendations),
            optimized_dimensions=PrintDimensions(width=width, height=height),
        )
