"""Aggregate extracted entities into deterministically ordered groups."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .extract import Extraction
    from .model import DiscoveredEntity, GroupsByName


@dataclass(slots=True, kw_only=True)
class CollectedGroups:
    groups: GroupsByName = field(default_factory=dict)
    skipped: tuple[Extraction, ...] = ()

    @property
    def group_names(self) -> tuple[str, ...]:
        return tuple(self.groups)

    @property
    def entity_count(self) -> int:
        return sum(len(entities) for entities in self.groups.values())


def collect_groups(extractions: Iterable[Extraction]) -> CollectedGroups:
    """Partition discovered entities by group name.

    Groups come out ordered by group name and entities within a group by display
    name. Both sorts are stable, so workloads resolving to the same name in the same
    group keep their listing order.
    """

    buckets: defaultdict[str, list[DiscoveredEntity]] = defaultdict(list)
    skipped: list[Extraction] = []
    for extraction in extractions:
        if extraction.skip is not None:
            skipped.append(extraction)
        if extraction.entity is None:
            continue
        buckets[extraction.entity.group_name].append(extraction.entity)

    groups: GroupsByName = {
        group_name: tuple(sorted(buckets[group_name], key=lambda entity: entity.name))
        for group_name in sorted(buckets)
    }
    return CollectedGroups(groups=groups, skipped=tuple(skipped))
