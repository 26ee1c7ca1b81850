"""Turn one workload's annotations into a discovered entity or a skip."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .model import (
    ANNOTATION_DESCRIPTION,
    ANNOTATION_ENABLED,
    ANNOTATION_GROUP,
    ANNOTATION_HREF,
    ANNOTATION_ICON,
    ANNOTATION_NAME,
    ANNOTATION_WEIGHT,
    DEFAULT_GROUP,
    DiscoveredEntity,
)

if TYPE_CHECKING:
    from .model import WorkloadMetadata

log = getLogger(__name__)


class SkipReason(StrEnum):
    """Why an opted-in workload produced no entity."""

    MISSING_HREF = "missing_href"


@dataclass(slots=True, frozen=True, kw_only=True)
class Extraction:
    """Extractor outcome for one workload.

    ``entity`` is set for discovered workloads, ``skip`` for workloads that opted in
    but lack required metadata. Both are ``None`` when the workload did not opt in.
    """

    workload: str
    entity: DiscoveredEntity | None = None
    skip: SkipReason | None = None


def extract_entity(workload: WorkloadMetadata) -> Extraction:
    annotations = workload.annotations
    if annotations.get(ANNOTATION_ENABLED) != "true":
        return Extraction(workload=workload.ref)

    href = annotations.get(ANNOTATION_HREF, "")
    if not href:
        log.info("Skipping service %s: no href annotation", workload.ref)
        return Extraction(workload=workload.ref, skip=SkipReason.MISSING_HREF)

    entity = DiscoveredEntity(
        name=annotations.get(ANNOTATION_NAME) or workload.name,
        href=href,
        group_name=annotations.get(ANNOTATION_GROUP) or DEFAULT_GROUP,
        description=annotations.get(ANNOTATION_DESCRIPTION) or None,
        icon=annotations.get(ANNOTATION_ICON) or None,
        weight=_parse_weight(workload),
    )
    log.info("Discovered service: %s (%s) -> %s", entity.name, entity.group_name, entity.href)
    return Extraction(workload=workload.ref, entity=entity)


def _parse_weight(workload: WorkloadMetadata) -> int | None:
    raw = workload.annotations.get(ANNOTATION_WEIGHT)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer weight %r on service %s", raw, workload.ref)
        return None
