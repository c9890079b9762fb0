"""
Batch Declarations

A batch is a named group of seed records with optional prerequisite
batches and group tags. Its ``load`` callable receives a ``SeedContext``;
any ``records`` are seeded after ``load`` returns.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, TYPE_CHECKING

from quizseed.core.exceptions import DependencyError

from .records import QuestionRecord
from .upsert import SeedStats

if TYPE_CHECKING:
    from .context import SeedContext

BatchLoader = Callable[["SeedContext"], None]


class BatchState(str, Enum):
    """Lifecycle of a batch within a run."""
    PENDING = "pending"
    RUNNING = "running"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


@dataclass
class Batch:
    name: str
    depends_on: List[str] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)
    load: Optional[BatchLoader] = None
    records: List[QuestionRecord] = field(default_factory=list)
    description: Optional[str] = None
    source: Optional[str] = None

    def in_groups(self, groups: Iterable[str]) -> bool:
        return bool(set(self.groups) & set(groups))

    def execute(self, context: "SeedContext") -> None:
        if self.load is not None:
            self.load(context)
        for record in self.records:
            context.seed_question(record)


@dataclass
class BatchResult:
    """Outcome of one batch in a run."""
    name: str
    state: BatchState = BatchState.PENDING
    stats: SeedStats = field(default_factory=SeedStats)
    duration: float = 0.0
    error: Optional[str] = None


def _first_line(text: Optional[str]) -> Optional[str]:
    lines = (text or "").strip().splitlines()
    return lines[0] if lines else None


class BatchRegistry:
    """Collects batches declared in Python code."""

    def __init__(self):
        self._batches: List[Batch] = []

    def __iter__(self):
        return iter(self._batches)

    def __len__(self) -> int:
        return len(self._batches)

    def add(self, batch: Batch) -> Batch:
        if any(existing.name == batch.name for existing in self._batches):
            raise DependencyError(f"Batch '{batch.name}' is already registered", batch_name=batch.name)
        self._batches.append(batch)
        return batch

    def batch(self, name: Optional[str] = None, depends_on: Sequence[str] = (),
              groups: Sequence[str] = (), description: Optional[str] = None):
        """
        Decorator registering a loader function as a batch.

        Example:
            @registry.batch(depends_on=["base"], groups=["documentation"])
            def subcategory_documentation(context):
                ...
        """
        def decorator(func: BatchLoader) -> BatchLoader:
            self.add(Batch(
                name=name or func.__name__,
                depends_on=list(depends_on),
                groups=list(groups),
                load=func,
                description=description or _first_line(func.__doc__),
                source=f"{func.__module__}.{func.__qualname__}",
            ))
            return func
        return decorator


# Built-in Python batches register here on import of quizseed.fixtures
default_registry = BatchRegistry()
