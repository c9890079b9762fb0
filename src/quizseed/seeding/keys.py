"""
Natural Keys

Hashable key types identifying seeded entities by their human-meaningful
fields, plus the content fingerprint stored on each question.
"""

import hashlib
from dataclasses import dataclass
from typing import Iterable, Tuple, Union


@dataclass(frozen=True)
class CategoryKey:
    name: str


@dataclass(frozen=True)
class SubcategoryKey:
    """Subcategory names only need to be unique inside their category."""
    category: str
    name: str


@dataclass(frozen=True)
class QuestionKey:
    text: str


@dataclass(frozen=True)
class UserKey:
    email: str


NaturalKey = Union[CategoryKey, SubcategoryKey, QuestionKey, UserKey]


def _normalize(value: str) -> str:
    return value.strip().lower()


def question_fingerprint(text: str, category_name: str, subcategory_name: str,
                         answers: Iterable[Tuple[str, bool]]) -> str:
    """
    Content fingerprint of a question.

    Answers are sorted so that reordering them does not change the value.

    Args:
        text: Question text
        category_name: Owning category name
        subcategory_name: Owning subcategory name
        answers: (text, is_correct) pairs

    Returns:
        First 16 hex characters of the SHA-256 digest
    """
    parts = [_normalize(text), category_name, subcategory_name]

    answer_strings = sorted(
        f"{_normalize(answer_text)}:{'1' if correct else '0'}"
        for answer_text, correct in answers
    )
    if answer_strings:
        parts.append("|".join(answer_strings))

    normalized = "###".join(parts)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]
