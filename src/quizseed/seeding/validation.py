"""
Seed Record Validation

Structural checks on question records before anything is materialized:
answer counts, correct-answer counts per question type, difficulty range,
and category/subcategory pairing.
"""

from typing import Any, List, Optional, Tuple

from quizseed.core.exceptions import ValidationError
from quizseed.storage.models.enums import QuestionType
from quizseed.utils.logging import get_logger

from .records import QuestionRecord

logger = get_logger(__name__)

MIN_ANSWERS = 2
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 4


class RecordValidator:
    """Validation rules for question records."""

    def __init__(self, strict_mode: bool = False):
        """
        Initialize validator.

        Args:
            strict_mode: If True, also reject duplicate answer texts and
                true/false questions with other than two answers
        """
        self.strict_mode = strict_mode

    def validate_question(self, record: QuestionRecord) -> Tuple[bool, List[str]]:
        """
        Validate the content of a question record.

        Args:
            record: Question record to validate

        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        issues = []

        if not record.text or not record.text.strip():
            issues.append("Question text is empty")

        if not (MIN_DIFFICULTY <= record.difficulty <= MAX_DIFFICULTY):
            issues.append(
                f"Difficulty {record.difficulty} outside {MIN_DIFFICULTY}-{MAX_DIFFICULTY}"
            )

        if not record.answers:
            issues.append("Question has no answers")
            return False, issues

        if len(record.answers) < MIN_ANSWERS:
            issues.append(f"Question has {len(record.answers)} answer(s), minimum {MIN_ANSWERS}")

        correct = record.correct_count
        if record.type.requires_single_correct:
            if correct != 1:
                issues.append(
                    f"{record.type.label} question must have exactly one correct answer, found {correct}"
                )
        elif correct < 1:
            issues.append("Multiple Choice question must have at least one correct answer")

        if self.strict_mode:
            texts = [answer.text.strip().lower() for answer in record.answers]
            if len(set(texts)) != len(texts):
                issues.append("Question has duplicate answer texts")

            if record.type is QuestionType.TRUE_FALSE and len(record.answers) != 2:
                issues.append("True / False question must have exactly two answers")

        return len(issues) == 0, issues

    def validate_references(self, record: QuestionRecord, category: Optional[Any],
                            subcategory: Optional[Any]) -> Tuple[bool, List[str]]:
        """Check resolved category/subcategory entities for a record."""
        issues = []

        if category is None:
            issues.append(f"Category for question '{record.text[:50]}' is not set")
        if subcategory is None:
            issues.append(f"Subcategory for question '{record.text[:50]}' is not set")

        if category is not None and subcategory is not None:
            owner = subcategory.category
            if owner is not category and (owner is None or owner.name != category.name):
                issues.append(
                    f"Subcategory '{subcategory.name}' belongs to "
                    f"'{owner.name if owner else None}', not '{category.name}'"
                )

        return len(issues) == 0, issues

    def ensure_valid(self, record: QuestionRecord, category: Optional[Any] = None,
                     subcategory: Optional[Any] = None, check_references: bool = True) -> None:
        """Raise ValidationError listing every issue found in the record."""
        is_valid, issues = self.validate_question(record)

        if check_references:
            refs_valid, ref_issues = self.validate_references(record, category, subcategory)
            is_valid = is_valid and refs_valid
            issues.extend(ref_issues)

        if not is_valid:
            logger.debug(f"Rejected question '{record.text[:50]}': {issues}")
            raise ValidationError(
                f"Invalid question '{record.text[:80]}': {'; '.join(issues)}",
                field_name="question",
                invalid_value=record.text
            )
