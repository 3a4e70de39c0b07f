"""
Observability layer for diff runs.

This module provides metrics collection and reporting for diff runs.

Main exports:
- DiffMetrics: Tracks counts and source health for a diff run
- DiffReporter: Generates Markdown reports and JSON exports
"""
from .metrics import DiffMetrics
from .reporter import DiffReporter

__all__ = [
    "DiffMetrics",
    "DiffReporter",
]
