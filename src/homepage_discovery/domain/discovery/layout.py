"""Additive layout entries for discovered groups in ``settings.yaml``."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from .serialization import dump_yaml, parse_settings_document

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)

LAYOUT_KEY: Final[str] = "layout"
DEFAULT_LAYOUT_STYLE: Final[str] = "row"
DEFAULT_LAYOUT_COLUMNS: Final[int] = 4


@dataclass(slots=True, frozen=True, kw_only=True)
class LayoutSyncResult:
    text: str
    added: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added)


def default_layout_block(group_name: str) -> dict[str, dict[str, Any]]:
    return {group_name: {"style": DEFAULT_LAYOUT_STYLE, "columns": DEFAULT_LAYOUT_COLUMNS}}


def sync_layout(settings: dict[Any, Any], group_names: Iterable[str]) -> tuple[str, ...]:
    """Append a default block to ``settings['layout']`` for each missing group.

    Mutates ``settings`` in place and returns the names that were added. Settings
    without a layout sequence are left alone; existing blocks are never touched.
    """

    layout = settings.get(LAYOUT_KEY)
    if not isinstance(layout, list):
        return ()

    present = {key for block in layout if isinstance(block, dict) for key in block}
    added: list[str] = []
    for group_name in group_names:
        if group_name in present:
            continue
        layout.append(default_layout_block(group_name))
        present.add(group_name)
        added.append(group_name)
    return tuple(added)


def sync_layout_document(settings_text: str, group_names: Iterable[str]) -> LayoutSyncResult:
    """Text-level wrapper around :func:`sync_layout`.

    An empty settings document is a no-op. The original text is returned verbatim
    unless blocks were added.
    """

    settings = parse_settings_document(settings_text)
    if settings is None:
        return LayoutSyncResult(text=settings_text)

    added = sync_layout(settings, group_names)
    if not added:
        return LayoutSyncResult(text=settings_text)

    log.info("Added layout entries for groups: %s", ", ".join(added))
    return LayoutSyncResult(text=dump_yaml(settings), added=added)
