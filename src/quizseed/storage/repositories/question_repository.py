"""
Question Repository

Reporting and maintenance queries over seeded questions: counts,
statistics, duplicate detection and identifier backfill.
"""

from typing import List, Optional, Dict, Any, Set
from sqlalchemy.orm import Session
from sqlalchemy import func

from quizseed.core.exceptions import DatabaseError
from quizseed.seeding.keys import question_fingerprint
from quizseed.storage.models import Answer, Category, Question, Subcategory, User


def _normalized_text():
    return func.lower(func.trim(Question.text))


class QuestionRepository:
    """Repository for question reporting and maintenance."""

    def __init__(self, session: Session):
        """Initialize repository with a session."""
        self.session = session

    def _count(self, model, table: str) -> int:
        try:
            return self.session.query(func.count(model.id)).scalar() or 0
        except Exception as e:
            raise DatabaseError(
                f"Failed to count {table}: {str(e)}",
                operation="count",
                table=table
            ) from e

    def count_categories(self) -> int:
        return self._count(Category, "categories")

    def count_subcategories(self) -> int:
        return self._count(Subcategory, "subcategories")

    def count_answers(self) -> int:
        return self._count(Answer, "answers")

    def count_users(self) -> int:
        return self._count(User, "users")

    def count_questions(self, category: Optional[str] = None,
                        certification: Optional[bool] = None) -> int:
        """Count questions with optional filters."""
        try:
            query = self.session.query(func.count(Question.id))

            if category:
                query = query.join(Category, Question.category_id == Category.id).filter(Category.name == category)
            if certification is not None:
                query = query.filter(Question.is_certification == certification)

            return query.scalar() or 0

        except Exception as e:
            raise DatabaseError(
                f"Failed to count questions: {str(e)}",
                operation="count",
                table="questions"
            ) from e

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get totals and distributions for the seeded data.

        Returns:
            Dictionary with per-table totals plus question counts per
            category, per type and per difficulty
        """
        try:
            category_rows = (
                self.session.query(Category.name, func.count(Question.id))
                .outerjoin(Question, Question.category_id == Category.id)
                .group_by(Category.id, Category.name)
                .order_by(Category.name)
                .all()
            )
            type_rows = (
                self.session.query(Question.type, func.count(Question.id))
                .group_by(Question.type)
                .all()
            )
            difficulty_rows = (
                self.session.query(Question.difficulty, func.count(Question.id))
                .group_by(Question.difficulty)
                .order_by(Question.difficulty)
                .all()
            )
        except Exception as e:
            raise DatabaseError(
                f"Failed to get question statistics: {str(e)}",
                operation="statistics",
                table="questions"
            ) from e

        return {
            'total_categories': self.count_categories(),
            'total_subcategories': self.count_subcategories(),
            'total_questions': self.count_questions(),
            'total_answers': self.count_answers(),
            'total_users': self.count_users(),
            'certification_questions': self.count_questions(certification=True),
            'category_distribution': {name: count for name, count in category_rows},
            'type_distribution': {question_type: count for question_type, count in type_rows},
            'difficulty_distribution': {difficulty: count for difficulty, count in difficulty_rows},
        }

    def find_duplicate_groups(self) -> List[Dict[str, Any]]:
        """
        Find questions whose text is equal after trimming and lower-casing.

        Returns:
            One entry per group, largest first: ``text`` (of the lowest id),
            ``count`` and ``ids`` in ascending order
        """
        try:
            normalized = _normalized_text()
            groups = (
                self.session.query(normalized.label("normalized"), func.count(Question.id).label("count"))
                .group_by(normalized)
                .having(func.count(Question.id) > 1)
                .order_by(func.count(Question.id).desc())
                .all()
            )

            duplicates = []
            for group in groups:
                questions = (
                    self.session.query(Question)
                    .filter(normalized == group.normalized)
                    .order_by(Question.id)
                    .all()
                )
                duplicates.append({
                    'text': questions[0].text,
                    'count': group.count,
                    'ids': [question.id for question in questions],
                })
            return duplicates

        except Exception as e:
            raise DatabaseError(
                f"Failed to find duplicate questions: {str(e)}",
                operation="query",
                table="questions"
            ) from e

    def delete_duplicates(self) -> int:
        """
        Delete duplicate questions, keeping the lowest id of each group.

        Returns:
            Number of questions deleted
        """
        groups = self.find_duplicate_groups()
        try:
            deleted = 0
            for group in groups:
                for question_id in group['ids'][1:]:
                    question = self.session.get(Question, question_id)
                    if question is not None:
                        self.session.delete(question)
                        deleted += 1
            self.session.commit()
            return deleted

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(
                f"Failed to delete duplicate questions: {str(e)}",
                operation="delete",
                table="questions"
            ) from e

    def backfill_identifiers(self) -> int:
        """
        Assign a content fingerprint to every question that has none.

        A fingerprint already taken by another question gets a numeric
        suffix (``_1``, ``_2``, ...).

        Returns:
            Number of questions updated
        """
        try:
            used: Set[str] = {
                identifier for (identifier,) in
                self.session.query(Question.identifier).filter(Question.identifier.isnot(None)).all()
            }
            missing = (
                self.session.query(Question)
                .filter((Question.identifier.is_(None)) | (Question.identifier == ""))
                .order_by(Question.id)
                .all()
            )

            for question in missing:
                base = question_fingerprint(
                    question.text,
                    question.category.name,
                    question.subcategory.name,
                    [(answer.text, answer.is_correct) for answer in question.answers],
                )
                identifier = base
                suffix = 1
                while identifier in used:
                    identifier = f"{base}_{suffix}"
                    suffix += 1
                question.identifier = identifier
                used.add(identifier)

            self.session.commit()
            return len(missing)

        except Exception as e:
            self.session.rollback()
            raise DatabaseError(
                f"Failed to backfill question identifiers: {str(e)}",
                operation="update",
                table="questions"
            ) from e
