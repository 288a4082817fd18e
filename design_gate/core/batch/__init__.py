from .classifier import BatchClassifier, coerce_design_file

__all__ = ["BatchClassifier", "coerce_design_file"]
