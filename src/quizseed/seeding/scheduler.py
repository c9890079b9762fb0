"""
Batch Scheduling

Orders batches so that every batch runs after the batches it depends on.
Among batches whose dependencies are satisfied, declaration order wins,
which keeps runs reproducible.
"""

import heapq
from typing import Dict, Iterable, List, Optional, Sequence, Set

from quizseed.core.exceptions import ConfigurationError, DependencyError
from quizseed.utils.logging import get_logger

from .batch import Batch

logger = get_logger(__name__)


def _index_batches(batches: Sequence[Batch]) -> Dict[str, int]:
    positions: Dict[str, int] = {}
    for position, batch in enumerate(batches):
        if batch.name in positions:
            raise DependencyError(f"Batch '{batch.name}' is declared more than once", batch_name=batch.name)
        positions[batch.name] = position

    for batch in batches:
        for dependency in batch.depends_on:
            if dependency not in positions:
                raise DependencyError(
                    f"Batch '{batch.name}' depends on unknown batch '{dependency}'",
                    batch_name=batch.name,
                    dependency=dependency
                )
            if dependency == batch.name:
                raise DependencyError(f"Batch '{batch.name}' depends on itself", batch_name=batch.name)

    return positions


def select_batches(batches: Sequence[Batch], groups: Optional[Iterable[str]] = None) -> Set[str]:
    """
    Names of the batches to run for ``groups`` plus everything they depend on.

    With no groups every batch is selected.
    """
    if not groups:
        return {batch.name for batch in batches}

    groups = list(groups)
    by_name = {batch.name: batch for batch in batches}
    selected = {batch.name for batch in batches if batch.in_groups(groups)}
    if not selected:
        raise ConfigurationError(f"No batches belong to groups {groups}")

    pending = list(selected)
    while pending:
        for dependency in by_name[pending.pop()].depends_on:
            if dependency not in selected:
                selected.add(dependency)
                pending.append(dependency)

    return selected


def resolve_order(batches: Sequence[Batch], groups: Optional[Iterable[str]] = None) -> List[Batch]:
    """
    Topologically sort batches, stable by declaration order.

    Args:
        batches: Declared batches, in declaration order
        groups: Optional group tags restricting the run

    Returns:
        Batches in execution order

    Raises:
        DependencyError: On duplicate names, unknown dependencies or cycles
        ConfigurationError: If no batch belongs to the requested groups
    """
    positions = _index_batches(batches)
    selected = select_batches(batches, groups)

    remaining = {
        batch.name: len(set(batch.depends_on))
        for batch in batches if batch.name in selected
    }
    dependents: Dict[str, List[str]] = {name: [] for name in remaining}
    for batch in batches:
        if batch.name in selected:
            for dependency in set(batch.depends_on):
                dependents[dependency].append(batch.name)

    ready = [positions[name] for name, count in remaining.items() if count == 0]
    heapq.heapify(ready)

    ordered: List[Batch] = []
    while ready:
        batch = batches[heapq.heappop(ready)]
        ordered.append(batch)
        for dependent in dependents[batch.name]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                heapq.heappush(ready, positions[dependent])

    if len(ordered) != len(remaining):
        stuck = sorted(
            (name for name, count in remaining.items() if count > 0),
            key=positions.__getitem__
        )
        raise DependencyError(
            f"Dependency cycle between batches: {', '.join(stuck)}",
            batch_name=stuck[0],
            batches=stuck
        )

    logger.debug(f"Resolved batch order: {[batch.name for batch in ordered]}")
    return ordered
