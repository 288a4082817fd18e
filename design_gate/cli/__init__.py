"""Command line interface for design-gate."""
