"""
Fixture Loader

Turns YAML fixture files into batches. A fixture file declares one batch:

    name: certification_questions
    description: Certification-style training questions
    depends_on: [base]
    groups: [questions]
    requires:
      categories: [Symfony, PHP]
    categories:
      - {name: Symfony, description: ..., icon: code, color: "#000000"}
    subcategories:
      Symfony:
        Process: Process component for executing system commands
    users:
      - {email: user@quiz.local, username: Quiz User, password_hash: ...}
    defaults:
      certification: false
    questions:
      - category: Symfony
        subcategory: Process
        text: ...
        type: true_false
        answers:
          - {text: "Yes", correct: true}
          - {text: "No", correct: false}

Reference data is upserted in the order categories, subcategories, users;
questions are seeded after that, in file order.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from quizseed.core.exceptions import FixtureFormatError, ValidationError
from quizseed.utils.logging import get_logger

from .batch import Batch, BatchRegistry, default_registry
from .records import CategoryRecord, SubcategoryRecord, QuestionRecord, UserRecord

logger = get_logger(__name__)

BUILTIN_FIXTURE_DIR = Path(__file__).resolve().parent.parent / "fixtures"

_KNOWN_KEYS = {
    "name", "description", "depends_on", "groups", "requires",
    "categories", "subcategories", "users", "defaults", "questions",
}


def _as_list(value: Any, field: str, path: Path) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise FixtureFormatError(
            f"'{field}' must be a list in {path.name}",
            file_path=str(path)
        )
    return value


def _subcategory_records(value: Any, path: Path) -> List[SubcategoryRecord]:
    if value is None:
        return []
    if not isinstance(value, dict):
        raise FixtureFormatError(
            f"'subcategories' must map category names to subcategories in {path.name}",
            file_path=str(path)
        )

    records = []
    for category, entries in value.items():
        if isinstance(entries, dict):
            # {name: description} or {name: {description, documentation_url}}
            for name, detail in entries.items():
                data = dict(detail) if isinstance(detail, dict) else {"description": detail}
                data.update(category=category, name=name)
                records.append(SubcategoryRecord.from_dict(data))
        else:
            for name in _as_list(entries, f"subcategories.{category}", path):
                records.append(SubcategoryRecord.from_dict({"category": category, "name": name}))
    return records


class _FixtureLoad:
    """Loader callable for a batch declared in a fixture file."""

    def __init__(self, required_categories: List[str], categories: List[CategoryRecord],
                 subcategories: List[SubcategoryRecord], users: List[UserRecord]):
        self.required_categories = required_categories
        self.categories = categories
        self.subcategories = subcategories
        self.users = users

    def __call__(self, context) -> None:
        for name in self.required_categories:
            context.require_category(name)
        for record in self.categories:
            context.upsert_category(record)
        for record in self.subcategories:
            context.upsert_subcategory(record)
        for record in self.users:
            context.upsert_user(record)


def parse_fixture(data: Any, path: Union[str, Path]) -> Batch:
    """
    Build a batch from an already parsed fixture document.

    Raises:
        FixtureFormatError: If the document does not describe a batch
    """
    path = Path(path)
    if not isinstance(data, dict):
        raise FixtureFormatError(f"Fixture {path.name} must be a mapping", file_path=str(path))

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise FixtureFormatError(
            f"Unknown keys in {path.name}: {', '.join(sorted(unknown))}",
            file_path=str(path)
        )

    name = data.get("name") or path.stem
    requires = data.get("requires") or {}
    if not isinstance(requires, dict):
        raise FixtureFormatError(f"'requires' must be a mapping in {path.name}", file_path=str(path))

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise FixtureFormatError(f"'defaults' must be a mapping in {path.name}", file_path=str(path))

    try:
        categories = [CategoryRecord.from_dict(item) for item in _as_list(data.get("categories"), "categories", path)]
        subcategories = _subcategory_records(data.get("subcategories"), path)
        users = [UserRecord.from_dict(item) for item in _as_list(data.get("users"), "users", path)]

        questions = []
        for index, item in enumerate(_as_list(data.get("questions"), "questions", path)):
            if not isinstance(item, dict):
                raise ValidationError(f"Question #{index + 1} must be a mapping", invalid_value=item)
            questions.append(QuestionRecord.from_dict({**defaults, **item}))
    except (ValidationError, TypeError, AttributeError) as e:
        raise FixtureFormatError(
            f"Invalid record in {path.name}: {e}",
            file_path=str(path)
        ) from e

    return Batch(
        name=str(name),
        depends_on=[str(dep) for dep in _as_list(data.get("depends_on"), "depends_on", path)],
        groups=[str(group) for group in _as_list(data.get("groups"), "groups", path)],
        load=_FixtureLoad(
            [str(category) for category in _as_list(requires.get("categories"), "requires.categories", path)],
            categories,
            subcategories,
            users,
        ),
        records=questions,
        description=data.get("description"),
        source=str(path),
    )


def load_fixture_file(path: Union[str, Path]) -> Batch:
    """
    Load one YAML fixture file as a batch.

    Args:
        path: Path to the fixture file

    Returns:
        The declared batch

    Raises:
        FixtureFormatError: If the file is missing, not valid YAML, or malformed
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise FixtureFormatError(f"Cannot read fixture {path}: {e}", file_path=str(path)) from e
    except yaml.YAMLError as e:
        raise FixtureFormatError(f"Failed to parse fixture {path}: {e}", file_path=str(path)) from e

    batch = parse_fixture(data, path)
    logger.debug(f"Loaded batch '{batch.name}' from {path.name} ({len(batch.records)} questions)")
    return batch


def _fixture_files(path: Path) -> List[Path]:
    if path.is_dir():
        return sorted(list(path.glob("*.yaml")) + list(path.glob("*.yml")))
    if path.is_file():
        return [path]
    raise FixtureFormatError(f"Fixture path does not exist: {path}", file_path=str(path))


def discover_batches(paths: Optional[Iterable[Union[str, Path]]] = None, include_builtin: bool = True,
                     registry: Optional[BatchRegistry] = None) -> List[Batch]:
    """
    Collect batches from fixture directories and the Python registry.

    Built-in fixture files come first, then ``paths`` in the given order
    (files within a directory sorted by name), then registered Python batches.

    Args:
        paths: Extra fixture files or directories
        include_builtin: Include the packaged fixtures and registered batches
        registry: Registry of Python batches (defaults to the built-in one)

    Returns:
        Batches in declaration order
    """
    directories: List[Path] = []
    if include_builtin:
        directories.append(BUILTIN_FIXTURE_DIR)
    directories.extend(Path(p) for p in paths or [])

    batches = []
    for directory in directories:
        for file_path in _fixture_files(directory):
            batches.append(load_fixture_file(file_path))

    if registry is None and include_builtin:
        # Registers the built-in Python batches on default_registry
        import quizseed.fixtures  # noqa: F401
        registry = default_registry
    if registry is not None:
        batches.extend(registry)

    logger.info(f"Discovered {len(batches)} batch(es)")
    return batches
