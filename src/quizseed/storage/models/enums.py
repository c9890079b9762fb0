"""
Enumerations shared by the quiz models and seed records.
"""

from enum import Enum


class QuestionType(str, Enum):
    """How many answers of a question may be correct."""
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"

    @property
    def label(self) -> str:
        return {
            QuestionType.SINGLE_CHOICE: "Single Choice",
            QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
            QuestionType.TRUE_FALSE: "True / False",
        }[self]

    @property
    def requires_single_correct(self) -> bool:
        return self is not QuestionType.MULTIPLE_CHOICE


class SymfonyVersion(str, Enum):
    """Framework version a certification question targets."""
    V7_4_8_0 = "7.4/8.0"

    @property
    def label(self) -> str:
        return {
            SymfonyVersion.V7_4_8_0: "Symfony 7.4 / 8.0",
        }[self]
