"""
Storage Module

Data persistence layer: SQLAlchemy ORM models for the quiz schema, the
store boundary used by the seeder, and reporting repositories.
"""

from .models import (
    Category,
    Subcategory,
    Question,
    Answer,
    User,
    QuestionType,
    SymfonyVersion,
)
from .store import Store, SessionStore
from .repositories import QuestionRepository

__all__ = [
    # Models
    "Category",
    "Subcategory",
    "Question",
    "Answer",
    "User",
    "QuestionType",
    "SymfonyVersion",
    # Store
    "Store",
    "SessionStore",
    # Repositories
    "QuestionRepository",
]
