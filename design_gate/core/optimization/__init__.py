from .print_optimizer import PrintOptimizer

__all__ = ["PrintOptimizer"]
