"""
Upsert Orchestrator

Ties natural-key lookup, materialization and merging together. Every
``upsert_*`` call returns exactly one entity for its natural key, so running
the same records again never creates another row.

Merge policies decide what happens when a record matches an existing row:

    keep       create if missing, never touch an existing row
    overwrite  copy the record's fields onto the existing row; for questions
               the answer list is replaced in order (rows are reused by
               position, extras appended, surplus rows orphan-deleted)
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from quizseed.core.exceptions import MissingReferenceError
from quizseed.storage.models import Answer, Category, Question, Subcategory, User
from quizseed.storage.store import Store
from quizseed.utils.logging import get_logger

from .keys import CategoryKey, SubcategoryKey, QuestionKey, UserKey
from .lookup import NaturalKeyLookup
from .materializer import EntityMaterializer, fingerprint_for
from .records import CategoryRecord, SubcategoryRecord, QuestionRecord, UserRecord, AnswerRecord

logger = get_logger(__name__)

ENTITY_KINDS = ("category", "subcategory", "question", "user")


class MergePolicy(str, Enum):
    KEEP = "keep"
    OVERWRITE = "overwrite"


class Outcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


DEFAULT_POLICIES: Dict[str, MergePolicy] = {
    "category": MergePolicy.KEEP,
    "subcategory": MergePolicy.KEEP,
    "question": MergePolicy.OVERWRITE,
    "user": MergePolicy.KEEP,
}


@dataclass
class SeedStats:
    """Per entity kind counts of upsert outcomes."""
    counts: Counter = field(default_factory=Counter)

    def record(self, kind: str, outcome: Outcome) -> None:
        self.counts[(kind, outcome.value)] += 1

    def count(self, kind: str, outcome: Outcome) -> int:
        return self.counts[(kind, outcome.value)]

    def total(self, outcome: Outcome) -> int:
        return sum(n for (_, name), n in self.counts.items() if name == outcome.value)

    def __add__(self, other: "SeedStats") -> "SeedStats":
        return SeedStats(self.counts + other.counts)

    def as_rows(self) -> List[Dict[str, int]]:
        """One row per entity kind that saw any activity."""
        rows = []
        for kind in ENTITY_KINDS:
            row = {outcome.value: self.count(kind, outcome) for outcome in Outcome}
            if any(row.values()):
                rows.append({"kind": kind, **row})
        return rows


def coerce_policies(policies: Optional[Dict[str, str]]) -> Dict[str, MergePolicy]:
    merged = dict(DEFAULT_POLICIES)
    for kind, policy in (policies or {}).items():
        merged[kind] = MergePolicy(policy)
    return merged


class UpsertOrchestrator:
    """Find-or-create service shared by every batch of a run."""

    def __init__(self, store: Store, lookup: Optional[NaturalKeyLookup] = None,
                 materializer: Optional[EntityMaterializer] = None,
                 policies: Optional[Dict[str, str]] = None):
        self.store = store
        self.lookup = lookup or NaturalKeyLookup(store)
        self.materializer = materializer or EntityMaterializer()
        self.policies = coerce_policies(policies)
        self.stats = SeedStats()

    @property
    def validator(self):
        return self.materializer.validator

    def _policy(self, kind: str) -> MergePolicy:
        return self.policies.get(kind, MergePolicy.KEEP)

    def _create(self, kind: str, key, entity):
        self.store.stage(entity)
        self.lookup.remember(key, entity)
        self.stats.record(kind, Outcome.CREATED)
        logger.debug(f"Created {kind} {key}")
        return entity

    def _merge(self, kind: str, key, entity, changed: bool):
        self.lookup.remember(key, entity)
        self.stats.record(kind, Outcome.UPDATED if changed else Outcome.UNCHANGED)
        if changed:
            logger.debug(f"Updated {kind} {key}")
        return entity

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def upsert_category(self, record: CategoryRecord) -> Category:
        key = CategoryKey(record.name)
        existing = self.lookup.category(record.name)
        if existing is None:
            return self._create("category", key, self.materializer.category(record))

        changed = False
        if self._policy("category") is MergePolicy.OVERWRITE:
            changed = _assign(existing, {
                "description": record.description,
                "icon": record.icon,
                "color": record.color,
            })
        return self._merge("category", key, existing, changed)

    def upsert_subcategory(self, record: SubcategoryRecord, category: Category) -> Subcategory:
        key = SubcategoryKey(category.name, record.name)
        existing = self.lookup.subcategory(category, record.name)
        if existing is None:
            return self._create("subcategory", key, self.materializer.subcategory(record, category))

        changed = False
        if self._policy("subcategory") is MergePolicy.OVERWRITE:
            changed = _assign(existing, {
                "description": record.description,
                "documentation_url": record.documentation_url,
            })
        return self._merge("subcategory", key, existing, changed)

    def upsert_user(self, record: UserRecord) -> User:
        key = UserKey(record.email)
        existing = self.lookup.user(record.email)
        if existing is None:
            return self._create("user", key, self.materializer.user(record))

        changed = False
        if self._policy("user") is MergePolicy.OVERWRITE:
            changed = _assign(existing, {
                "username": record.username,
                "password_hash": record.password_hash,
                "roles": list(record.roles),
            })
        return self._merge("user", key, existing, changed)

    def require_category(self, name: str) -> Category:
        """Resolve a category a batch depends on, or abort the run."""
        category = self.lookup.category(name)
        if category is None:
            raise MissingReferenceError(
                f"Category '{name}' not found; seed the batch that creates it first",
                entity_kind="category",
                key=name
            )
        return category

    def require_subcategory(self, category: Category, name: str,
                            fallback: Optional[str] = None) -> Subcategory:
        """
        Resolve a subcategory of ``category``.

        A fallback is used only when the caller names one explicitly; the
        substitution is logged so missing reference data stays visible.
        """
        subcategory = self.lookup.subcategory(category, name)
        if subcategory is not None:
            return subcategory

        if fallback:
            substitute = self.lookup.subcategory(category, fallback)
            if substitute is not None:
                logger.warning(
                    f"Subcategory '{category.name}:{name}' not found, using fallback '{fallback}'"
                )
                return substitute

        raise MissingReferenceError(
            f"Subcategory '{name}' not found in category '{category.name}'",
            entity_kind="subcategory",
            key=(category.name, name),
            fallback=fallback
        )

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def resolve_references(self, record: QuestionRecord) -> Tuple[Category, Subcategory]:
        category = self.require_category(record.category)
        subcategory = self.require_subcategory(category, record.subcategory, record.fallback_subcategory)
        return category, subcategory

    def seed_question(self, record: QuestionRecord) -> Question:
        """Resolve a record's category names, then upsert it."""
        category, subcategory = self.resolve_references(record)
        return self.upsert_question(record, category, subcategory)

    def upsert_question(self, record: QuestionRecord, category: Category,
                        subcategory: Subcategory) -> Question:
        """
        Create or merge a question keyed by its text.

        Raises:
            ValidationError: If the record is malformed, whether or not a
                stored question matches it
        """
        self.validator.ensure_valid(record, category, subcategory)

        key = QuestionKey(record.text)
        existing = self.lookup.question(record.text)
        if existing is None:
            return self._create("question", key, self.materializer.question(record, category, subcategory))

        changed = False
        if self._policy("question") is MergePolicy.OVERWRITE:
            changed = self._overwrite_question(existing, record, category, subcategory)
        return self._merge("question", key, existing, changed)

    def _overwrite_question(self, question: Question, record: QuestionRecord,
                            category: Category, subcategory: Subcategory) -> bool:
        changed = _assign(question, {
            "type": record.type.value,
            "difficulty": record.difficulty,
            "explanation": record.explanation,
            "resource_url": record.resource_url,
            "symfony_version": record.symfony_version,
            "is_certification": record.certification,
        }, skip_none=False)

        if question.category is not category:
            question.category = category
            changed = True
        if question.subcategory is not subcategory:
            question.subcategory = subcategory
            changed = True

        if _replace_answers(question, record.answers):
            changed = True

        fingerprint = fingerprint_for(record, category, subcategory)
        if question.identifier != fingerprint:
            question.identifier = fingerprint
            changed = True

        return changed


def _assign(entity, values: Dict[str, object], skip_none: bool = True) -> bool:
    """Set attributes that differ; returns whether anything changed."""
    changed = False
    for name, value in values.items():
        if value is None and skip_none:
            continue
        if getattr(entity, name) != value:
            setattr(entity, name, value)
            changed = True
    return changed


def _replace_answers(question: Question, answers: List[AnswerRecord]) -> bool:
    changed = False
    current = question.answers

    for index, record in enumerate(answers):
        if index < len(current):
            answer = current[index]
            if answer.text != record.text or answer.is_correct != record.correct:
                answer.text = record.text
                answer.is_correct = record.correct
                changed = True
        else:
            current.append(Answer(text=record.text, is_correct=record.correct))
            changed = True

    while len(current) > len(answers):
        current.pop()
        changed = True

    return changed
