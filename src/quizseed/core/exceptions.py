"""
Custom Exception Classes

Application-specific exception classes for the seeding pipeline. Lookups
that find nothing return None; exceptions are reserved for conditions that
abort a record, a batch, or the whole run.
"""

from typing import Optional, Any, Dict


class QuizSeedException(Exception):
    """Base exception class for all quiz-seed errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(QuizSeedException):
    """Raised when there's an issue with configuration setup or seed declarations."""
    pass


class MissingReferenceError(ConfigurationError):
    """Raised when a batch expects reference data that does not exist."""

    def __init__(self, message: str, entity_kind: Optional[str] = None,
                 key: Optional[Any] = None, **kwargs):
        super().__init__(message, kwargs)
        self.entity_kind = entity_kind
        self.key = key


class DependencyError(ConfigurationError):
    """Raised when batch dependencies are unknown, duplicated or cyclic."""

    def __init__(self, message: str, batch_name: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.batch_name = batch_name


class FixtureFormatError(ConfigurationError):
    """Raised when a fixture file cannot be parsed into a batch."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.file_path = file_path


class DatabaseError(QuizSeedException):
    """Raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 table: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.operation = operation
        self.table = table


class ValidationError(QuizSeedException):
    """Raised when a seed record is malformed."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 invalid_value: Optional[Any] = None, **kwargs):
        super().__init__(message, kwargs)
        self.field_name = field_name
        self.invalid_value = invalid_value


class BatchExecutionError(QuizSeedException):
    """Raised when a batch's loader fails for a reason outside the known taxonomy."""

    def __init__(self, message: str, batch_name: Optional[str] = None, **kwargs):
        super().__init__(message, kwargs)
        self.batch_name = batch_name
