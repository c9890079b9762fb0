"""
Utils Module

Logging configuration shared by the seeding pipeline and the CLI.
"""

from .logging import setup_logging, get_logger, get_batch_logger, PerformanceTimer

__all__ = [
    "setup_logging",
    "get_logger",
    "get_batch_logger",
    "PerformanceTimer",
]
