from .analysis_service import DesignAnalysisService

__all__ = ["DesignAnalysisService"]
