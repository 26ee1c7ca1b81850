"""Ownership-aware merge of discovered groups into ``services.yaml``."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from .serialization import dump_yaml, parse_services_document

if TYPE_CHECKING:
    from collections.abc import Container, Mapping, Sequence

    from .model import DiscoveredEntity

log = getLogger(__name__)

type GroupBlock = dict[Any, Any]


@dataclass(slots=True, frozen=True, kw_only=True)
class MergeResult:
    blocks: list[GroupBlock]
    text: str
    changed: bool


def merge_blocks(
    previous: Sequence[GroupBlock],
    groups: Mapping[str, Sequence[DiscoveredEntity]],
    owned: Container[str],
) -> list[GroupBlock]:
    """Replace every owned group of ``previous`` with the freshly discovered ``groups``.

    Unowned blocks stay in their relative order ahead of the regenerated groups and
    their entries are never looked at. Groups with no entities are left out.
    """

    merged: list[GroupBlock] = []
    for block in previous:
        if not any(group_name in owned for group_name in block):
            merged.append(block)
            continue
        foreign = {key: value for key, value in block.items() if key not in owned}
        if foreign:
            merged.append(foreign)

    for group_name, entities in groups.items():
        if not entities:
            continue
        merged.append({group_name: [entity.to_entry() for entity in entities]})
    return merged


def merge_document(
    previous_text: str,
    groups: Mapping[str, Sequence[DiscoveredEntity]],
    owned: Container[str],
) -> MergeResult:
    """Merge into the serialized document and report whether the text changed.

    Raises ``MalformedDocumentError`` when ``previous_text`` is not a sequence of
    group blocks; the previous document is never discarded silently.
    """

    blocks = merge_blocks(parse_services_document(previous_text), groups, owned)
    text = dump_yaml(blocks)
    changed = text != previous_text
    if not changed:
        log.info("No changes to services.yaml")
    return MergeResult(blocks=blocks, text=text, changed=changed)
