"""
Natural-Key Lookup

Resolves entities by their natural keys. Entities created earlier in the
same run may not be visible to the store yet, so every lookup consults the
in-run cache before querying.
"""

from typing import Any, Dict, Optional, Type

from quizseed.storage.models import Category, Subcategory, Question, User
from quizseed.storage.store import Store
from quizseed.utils.logging import get_logger

from .keys import CategoryKey, SubcategoryKey, QuestionKey, UserKey, NaturalKey

logger = get_logger(__name__)


class NaturalKeyLookup:
    """Find-by-natural-key with a per-run identity cache."""

    def __init__(self, store: Store):
        self.store = store
        self._cache: Dict[NaturalKey, Any] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: NaturalKey) -> bool:
        return key in self._cache

    def remember(self, key: NaturalKey, entity: Any) -> None:
        """Register an entity resolved or created during this run."""
        self._cache[key] = entity

    def clear(self) -> None:
        """Forget everything resolved this run (after a rollback)."""
        logger.debug(f"Clearing lookup cache ({len(self._cache)} entries)")
        self._cache.clear()

    def _resolve(self, key: NaturalKey, model: Type, **criteria: Any) -> Optional[Any]:
        if key in self._cache:
            return self._cache[key]

        entity = self.store.find_one_by(model, **criteria)
        if entity is not None:
            self._cache[key] = entity
        return entity

    def category(self, name: str) -> Optional[Category]:
        return self._resolve(CategoryKey(name), Category, name=name)

    def subcategory(self, category: Category, name: str) -> Optional[Subcategory]:
        key = SubcategoryKey(category.name, name)
        if category.id is None:
            # An unflushed category cannot own stored subcategories yet
            return self._cache.get(key)
        return self._resolve(key, Subcategory, name=name, category_id=category.id)

    def question(self, text: str) -> Optional[Question]:
        return self._resolve(QuestionKey(text), Question, text=text)

    def user(self, email: str) -> Optional[User]:
        return self._resolve(UserKey(email), User, email=email)
