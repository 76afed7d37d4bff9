"""Aggregate operational status from third-party status pages."""

__version__ = "0.1.0"
