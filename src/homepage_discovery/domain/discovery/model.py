"""Value types shared by the discovery stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

DEFAULT_GROUP: Final[str] = "Discovered"

ANNOTATION_ENABLED: Final[str] = "gethomepage.dev/enabled"
ANNOTATION_NAME: Final[str] = "gethomepage.dev/name"
ANNOTATION_DESCRIPTION: Final[str] = "gethomepage.dev/description"
ANNOTATION_GROUP: Final[str] = "gethomepage.dev/group"
ANNOTATION_ICON: Final[str] = "gethomepage.dev/icon"
ANNOTATION_HREF: Final[str] = "gethomepage.dev/href"
ANNOTATION_WEIGHT: Final[str] = "gethomepage.dev/weight"


@dataclass(slots=True, frozen=True, kw_only=True)
class WorkloadMetadata:
    """Identity and annotations of one observed workload."""

    name: str
    namespace: str = ""
    annotations: Mapping[str, str] = field(default_factory=dict)

    @property
    def ref(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@dataclass(slots=True, frozen=True, kw_only=True)
class DiscoveredEntity:
    """One dashboard link derived from a workload's annotations.

    Identity is ``(group_name, name)``; the same display name may appear in
    several groups.
    """

    name: str
    href: str
    group_name: str = DEFAULT_GROUP
    description: str | None = None
    icon: str | None = None
    weight: int | None = None

    def to_entry(self) -> dict[str, dict[str, str]]:
        """Render as a ``services.yaml`` entry, omitting empty optional fields."""

        body: dict[str, str] = {}
        if self.description:
            body["description"] = self.description
        body["href"] = self.href
        if self.icon:
            body["icon"] = self.icon
        return {self.name: body}


type GroupsByName = dict[str, tuple[DiscoveredEntity, ...]]


class OwnedGroupSet:
    """Group names a reconciler has produced entries for.

    The set only grows: once claimed, a group is regenerated from scratch on every
    later merge, and disappears from the document when nothing is discovered for it.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: set[str] = set(names)

    def claim(self, names: Iterable[str]) -> frozenset[str]:
        """Add ``names`` and return the ones that were not owned before."""

        new = frozenset(name for name in names if name not in self._names)
        self._names.update(new)
        return new

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"OwnedGroupSet({sorted(self._names)!r})"
