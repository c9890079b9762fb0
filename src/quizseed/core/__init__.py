"""
Core Module

Foundational components used across the application including configuration
management, database connections, and custom exceptions.
"""

from .config import get_config, set_config, reload_config, AppConfig
from .exceptions import (
    QuizSeedException,
    ConfigurationError,
    MissingReferenceError,
    DependencyError,
    FixtureFormatError,
    DatabaseError,
    ValidationError,
    BatchExecutionError,
)

__all__ = [
    "get_config",
    "set_config",
    "reload_config",
    "AppConfig",
    "QuizSeedException",
    "ConfigurationError",
    "MissingReferenceError",
    "DependencyError",
    "FixtureFormatError",
    "DatabaseError",
    "ValidationError",
    "BatchExecutionError",
]
