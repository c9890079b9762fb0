"""
CLI Module

Output formatting utilities for the Click-based command line interface.
"""

from .formatting import (
    console,
    format_table,
    format_plan,
    format_run_report,
    display_error,
)

__all__ = [
    "console",
    "format_table",
    "format_plan",
    "format_run_report",
    "display_error",
]
