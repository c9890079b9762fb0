"""
Seed Records

Plain declarative descriptions of the rows a batch wants to exist. Records
reference categories and subcategories by name; the orchestrator resolves
those names to entities before materializing anything.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from quizseed.core.exceptions import ValidationError
from quizseed.storage.models.enums import QuestionType, SymfonyVersion

DEFAULT_CATEGORY_ICON = "code"
DEFAULT_CATEGORY_COLOR = "#000000"

CATEGORY_FIELDS = frozenset({"name", "description", "icon", "color"})
SUBCATEGORY_FIELDS = frozenset({"category", "name", "description", "documentation_url", "documentationUrl"})
ANSWER_FIELDS = frozenset({"text", "correct"})
QUESTION_FIELDS = frozenset({
    "category", "subcategory", "text", "type", "difficulty", "explanation", "answers",
    "resource_url", "resourceUrl",
    "symfony_version", "symfonyVersion",
    "certification", "is_certification", "isCertification",
    "fallback_subcategory", "fallbackSubcategory",
})
USER_FIELDS = frozenset({"email", "username", "password_hash", "roles"})


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(
            f"{kind} record is missing required field '{key}'",
            field_name=key,
            invalid_value=value
        )
    return value


def _reject_unknown(data: Dict[str, Any], known: frozenset, kind: str) -> None:
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise ValidationError(
            f"{kind} record has unknown field(s): {', '.join(unknown)}",
            field_name=unknown[0],
            invalid_value=unknown
        )


def _flag(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(
            f"'{key}' flag must be a boolean",
            field_name=key,
            invalid_value=value
        )
    return value


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    # Fixture files written by hand mix snake_case and camelCase
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class CategoryRecord:
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryRecord":
        _reject_unknown(data, CATEGORY_FIELDS, "Category")
        return cls(
            name=str(_require(data, "name", "Category")).strip(),
            description=data.get("description"),
            icon=data.get("icon"),
            color=data.get("color"),
        )


@dataclass
class SubcategoryRecord:
    category: str
    name: str
    description: Optional[str] = None
    documentation_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubcategoryRecord":
        _reject_unknown(data, SUBCATEGORY_FIELDS, "Subcategory")
        return cls(
            category=str(_require(data, "category", "Subcategory")).strip(),
            name=str(_require(data, "name", "Subcategory")).strip(),
            description=data.get("description"),
            documentation_url=_first(data, "documentation_url", "documentationUrl"),
        )


@dataclass
class AnswerRecord:
    text: str
    correct: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnswerRecord":
        if not isinstance(data, dict):
            raise ValidationError("Answer must be a mapping", field_name="answers", invalid_value=data)
        _reject_unknown(data, ANSWER_FIELDS, "Answer")
        correct = _flag(data.get("correct", False), "correct")
        return cls(text=str(_require(data, "text", "Answer")), correct=correct)


@dataclass
class QuestionRecord:
    """One question with its answers in display order."""
    category: str
    subcategory: str
    text: str
    type: QuestionType
    difficulty: int = 1
    explanation: Optional[str] = None
    resource_url: Optional[str] = None
    symfony_version: Optional[str] = None
    certification: bool = False
    answers: List[AnswerRecord] = field(default_factory=list)
    fallback_subcategory: Optional[str] = None

    @property
    def correct_count(self) -> int:
        return sum(1 for answer in self.answers if answer.correct)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionRecord":
        """Build a record from a fixture mapping."""
        if not isinstance(data, dict):
            raise ValidationError("Question must be a mapping", invalid_value=data)
        _reject_unknown(data, QUESTION_FIELDS, "Question")

        raw_type = _require(data, "type", "Question")
        try:
            question_type = QuestionType(raw_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown question type '{raw_type}'",
                field_name="type",
                invalid_value=raw_type
            ) from e

        difficulty = data.get("difficulty", 1)
        if isinstance(difficulty, bool) or not isinstance(difficulty, int):
            raise ValidationError(
                "Question difficulty must be an integer",
                field_name="difficulty",
                invalid_value=difficulty
            )

        symfony_version = _first(data, "symfony_version", "symfonyVersion")
        if symfony_version is not None:
            try:
                symfony_version = SymfonyVersion(str(symfony_version)).value
            except ValueError as e:
                raise ValidationError(
                    f"Unknown Symfony version '{symfony_version}'",
                    field_name="symfony_version",
                    invalid_value=symfony_version
                ) from e

        answers = data.get("answers") or []
        if not isinstance(answers, list):
            raise ValidationError("Question answers must be a list", field_name="answers", invalid_value=answers)

        return cls(
            category=str(_require(data, "category", "Question")).strip(),
            subcategory=str(_require(data, "subcategory", "Question")).strip(),
            text=str(_require(data, "text", "Question")).strip(),
            type=question_type,
            difficulty=difficulty,
            explanation=data.get("explanation"),
            resource_url=_first(data, "resource_url", "resourceUrl"),
            symfony_version=symfony_version,
            certification=_flag(
                _first(data, "certification", "is_certification", "isCertification", default=False),
                "certification"
            ),
            answers=[AnswerRecord.from_dict(answer) for answer in answers],
            fallback_subcategory=_first(data, "fallback_subcategory", "fallbackSubcategory"),
        )


@dataclass
class UserRecord:
    email: str
    username: str
    password_hash: str
    roles: List[str] = field(default_factory=lambda: ["ROLE_USER"])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        _reject_unknown(data, USER_FIELDS, "User")
        roles = data.get("roles") or ["ROLE_USER"]
        return cls(
            email=str(_require(data, "email", "User")).strip().lower(),
            username=str(_require(data, "username", "User")),
            password_hash=str(_require(data, "password_hash", "User")),
            roles=[str(role) for role in roles],
        )
