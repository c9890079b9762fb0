"""
quiz-seed

Idempotent, dependency-ordered seeding of quiz reference data and questions.
"""

__version__ = "1.0.0"
