"""
Storage Models

SQLAlchemy ORM models for the quiz database.
"""

from .enums import QuestionType, SymfonyVersion
from .category import Category, Subcategory
from .question import Question, Answer
from .user import User

__all__ = [
    "QuestionType",
    "SymfonyVersion",
    "Category",
    "Subcategory",
    "Question",
    "Answer",
    "User",
]
