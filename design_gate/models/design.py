"""
Design classification models.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class DesignCategory(str, Enum):
    """Print product a design is intended for."""

    BUSINESS_CARD = "business_card"
    LOGO = "logo"
    LABEL = "label"
    BROCHURE = "brochure"
    POSTER = "poster"
    GENERAL = "general"


class Complexity(str, Enum):
    """Rough production complexity of a design."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class PrintDimensions(BaseModel):
    """Printable size in millimeters."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(..., gt=0, description="Width in millimeters")
    height: float = Field(..., gt=0, description="Height in millimeters")


class DesignClassification(BaseModel):
    """Heuristic classification of one uploaded design file."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique token for this analysis")
    name: str = Field(..., description="Original filename, unmodified")
    width: float = Field(..., gt=0, description="Width in millimeters")
    height: float = Field(..., gt=0, description="Height in millimeters")
    category: DesignCategory = Field(..., description="Detected print category")
    complexity: Complexity = Field(..., description="Production complexity")
    suggested_rotation: bool = Field(
        ..., description="Whether the design is tall enough to rotate"
    )
    confidence: float = Field(
        ..., ge=0.0, le=1.0, description="Fixed heuristic confidence"
    )

    @property
    def dimensions(self) -> PrintDimensions:
        return PrintDimensions(width=self.width, height=self.height)


class OptimizationResult(BaseModel):
    """Print optimization advice derived from a classification."""

    model_config = ConfigDict(frozen=True)

    recommendations: Tuple[str, ...] = Field(
        default=(), description="Human-readable recommendations, in rule order"
    )
    optimized_dimensions: PrintDimensions = Field(
        ..., description="Dimensions after standard-size corrections"
    )


class DesignFile(BaseModel):
    """A file descriptor handed over by the upload layer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: Optional[str] = Field(None, description="Storage path of the upload")
    name: str = Field(..., min_length=1, description="Original filename")
    mime_type: str = Field(..., alias="mimeType", description="Reported mimetype")


class DesignReport(BaseModel):
    """Classification together with its print optimization."""

    model_config = ConfigDict(frozen=True)

    classification: DesignClassification
    optimization: OptimizationResult
