"""Dependency closure of catalog partitions."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from catalogs.partition import CatalogPartition
    from contract.models import Location

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Index of the default location graph by canonical key.

    Built once per pass; the first location registered under a key wins.
    """

    def __init__(self, locations: Iterable[Location]) -> None:
        self._index: dict[str, Location] = {}
        for location in locations:
            key = location.primary_key
            if key in self._index:
                logger.warning(
                    f"Duplicate canonical key {key!r} in the default catalog; "
                    "keeping the first location."
                )
                continue
            self._index[key] = location

    def __len__(self) -> int:
        return len(self._index)

    def get(self, key: str) -> Location | None:
        return self._index.get(key)


@dataclass(frozen=True)
class ClosureResult:
    added: tuple[Location, ...] = field(default_factory=tuple)
    unresolved: tuple[str, ...] = field(default_factory=tuple)


def close_partition(
    partition: CatalogPartition,
    graph: DependencyGraph,
    *,
    adopt: Callable[[Location], Location] | None = None,
) -> ClosureResult:
    """Pull every transitive dependency of a partition into it.

    Traversal is breadth-first from the partition's current locations, and
    locations are appended in traversal order. A dependency id that is
    neither in ``graph`` nor already held by the partition is logged and
    recorded as unresolved; the partition is still usable.

    Args:
        partition: Partition to close, modified in place
        graph: Default graph used to resolve dependency ids
        adopt: Hook adding a pulled location to the partition and returning
            the instance that was added (default: ``partition.add``)

    Returns:
        ClosureResult with the locations added and the unresolved ids.
    """
    add = adopt if adopt is not None else partition.add

    queue: deque[Location] = deque(partition.locations)
    processed: set[int] = set()
    added: list[Location] = []
    unresolved: list[str] = []

    while queue:
        location = queue.popleft()
        if id(location) in processed:
            continue
        processed.add(id(location))

        for dependency_id in location.dependencies:
            held = partition.get(dependency_id)
            if held is not None:
                queue.append(held)
                continue

            dependency = graph.get(dependency_id)
            if dependency is None:
                if partition.record_unresolved(dependency_id):
                    unresolved.append(dependency_id)
                    logger.warning(
                        f"Could not find location for dependency ID "
                        f"'{dependency_id}' of catalog '{partition.name}' "
                        "in the default catalog."
                    )
                continue

            held = add(dependency)
            added.append(held)
            queue.append(held)

    return ClosureResult(added=tuple(added), unresolved=tuple(unresolved))


__all__ = ["ClosureResult", "DependencyGraph", "close_partition"]
