"""Heuristic print-design classification with health-gated admission."""

__version__ = "0.1.0"
