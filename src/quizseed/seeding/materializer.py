"""
Entity Materializer

Builds new, not-yet-staged ORM objects from seed records. Question records
are validated first, so a rejected record never produces a partial graph.
"""

from typing import Optional

from quizseed.storage.models import Answer, Category, Question, Subcategory, User

from .keys import question_fingerprint
from .records import (
    CategoryRecord,
    SubcategoryRecord,
    QuestionRecord,
    UserRecord,
    DEFAULT_CATEGORY_ICON,
    DEFAULT_CATEGORY_COLOR,
)
from .validation import RecordValidator


def fingerprint_for(record: QuestionRecord, category: Category, subcategory: Subcategory) -> str:
    return question_fingerprint(
        record.text,
        category.name,
        subcategory.name,
        [(answer.text, answer.correct) for answer in record.answers],
    )


class EntityMaterializer:
    """Constructs entity graphs for records that have no stored match."""

    def __init__(self, validator: Optional[RecordValidator] = None):
        self.validator = validator or RecordValidator()

    def category(self, record: CategoryRecord) -> Category:
        return Category(
            name=record.name,
            description=record.description or record.name,
            icon=record.icon or DEFAULT_CATEGORY_ICON,
            color=record.color or DEFAULT_CATEGORY_COLOR,
        )

    def subcategory(self, record: SubcategoryRecord, category: Category) -> Subcategory:
        return Subcategory(
            name=record.name,
            description=record.description or record.name,
            documentation_url=record.documentation_url,
            category=category,
        )

    def user(self, record: UserRecord) -> User:
        return User(
            email=record.email,
            username=record.username,
            password_hash=record.password_hash,
            roles=list(record.roles),
        )

    def question(self, record: QuestionRecord, category: Optional[Category],
                 subcategory: Optional[Subcategory]) -> Question:
        """
        Build a question and its answers in record order.

        Raises:
            ValidationError: If the record or its category pairing is invalid
        """
        self.validator.ensure_valid(record, category, subcategory)

        question = Question(
            text=record.text,
            type=record.type.value,
            difficulty=record.difficulty,
            explanation=record.explanation,
            resource_url=record.resource_url,
            symfony_version=record.symfony_version,
            is_certification=record.certification,
            category=category,
            subcategory=subcategory,
        )
        for answer in record.answers:
            question.answers.append(Answer(text=answer.text, is_correct=answer.correct))

        question.identifier = fingerprint_for(record, category, subcategory)
        return question
