"""
Seed Context

What a batch loader sees while it runs: the store, the shared upsert
orchestrator, and a logger tagged with the batch name. In permissive mode
invalid question records are logged and skipped instead of failing the batch.
"""

from typing import Optional

from quizseed.core.exceptions import ValidationError
from quizseed.storage.models import Category, Question, Subcategory, User
from quizseed.storage.store import Store
from quizseed.utils.logging import get_batch_logger

from .records import CategoryRecord, SubcategoryRecord, QuestionRecord, UserRecord
from .upsert import UpsertOrchestrator, Outcome


class SeedContext:
    """Per-batch facade over the run's upsert orchestrator."""

    def __init__(self, batch_name: str, orchestrator: UpsertOrchestrator,
                 permissive: bool = False):
        self.batch_name = batch_name
        self.orchestrator = orchestrator
        self.permissive = permissive
        self.logger = get_batch_logger(batch_name)
        self.question_logger = get_batch_logger(batch_name, entity_kind="question")

    @property
    def store(self) -> Store:
        return self.orchestrator.store

    def upsert_category(self, record: CategoryRecord) -> Category:
        return self.orchestrator.upsert_category(record)

    def upsert_subcategory(self, record: SubcategoryRecord, category: Optional[Category] = None) -> Subcategory:
        if category is None:
            category = self.require_category(record.category)
        return self.orchestrator.upsert_subcategory(record, category)

    def upsert_user(self, record: UserRecord) -> User:
        return self.orchestrator.upsert_user(record)

    def require_category(self, name: str) -> Category:
        return self.orchestrator.require_category(name)

    def require_subcategory(self, category: Category, name: str,
                            fallback: Optional[str] = None) -> Subcategory:
        return self.orchestrator.require_subcategory(category, name, fallback)

    def seed_question(self, record: QuestionRecord) -> Optional[Question]:
        """
        Upsert a question whose category and subcategory are given by name.

        Returns:
            The question, or None when permissive mode skipped an invalid record

        Raises:
            MissingReferenceError: If the category or subcategory does not exist
            ValidationError: If the record is invalid and the context is strict
        """
        try:
            return self.orchestrator.seed_question(record)
        except ValidationError as e:
            if not self.permissive:
                raise
            self.orchestrator.stats.record("question", Outcome.SKIPPED)
            self.question_logger.warning(f"Skipping invalid question: {e.message}")
            return None
