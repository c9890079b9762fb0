"""
Storage Repositories

Repository classes implementing the repository pattern for data access.
"""

from .question_repository import QuestionRepository

__all__ = [
    "QuestionRepository",
]
