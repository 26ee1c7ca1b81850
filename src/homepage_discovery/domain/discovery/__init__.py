"""Discovery of dashboard links from workload annotations.

Stages, leaves first:
1) ``extract``: one workload's annotations to an entity or a skip
2) ``collect``: entities to sorted groups
3) ``merge``: groups into ``services.yaml``, replacing only owned groups
4) ``layout``: default layout blocks for new groups in ``settings.yaml``
5) ``reconcile``: the driver running 1-4 against the ports
"""

from __future__ import annotations

from .collect import CollectedGroups, collect_groups
from .errors import (
    DiscoveryError,
    DocumentConflictError,
    DocumentStoreError,
    MalformedDocumentError,
    RolloutError,
    WorkloadSourceError,
)
from .extract import Extraction, SkipReason, extract_entity
from .layout import LayoutSyncResult, sync_layout, sync_layout_document
from .merge import MergeResult, merge_blocks, merge_document
from .model import (
    DEFAULT_GROUP,
    DiscoveredEntity,
    OwnedGroupSet,
    WorkloadMetadata,
)
from .reconcile import ReconcileDriver, ReconcileOutcome, ReconcilePlan, plan_reconcile

__all__ = [
    "DEFAULT_GROUP",
    "CollectedGroups",
    "DiscoveredEntity",
    "DiscoveryError",
    "DocumentConflictError",
    "DocumentStoreError",
    "Extraction",
    "LayoutSyncResult",
    "MalformedDocumentError",
    "MergeResult",
    "OwnedGroupSet",
    "ReconcileDriver",
    "ReconcileOutcome",
    "ReconcilePlan",
    "RolloutError",
    "SkipReason",
    "WorkloadMetadata",
    "WorkloadSourceError",
    "collect_groups",
    "extract_entity",
    "merge_blocks",
    "merge_document",
    "plan_reconcile",
    "sync_layout",
    "sync_layout_document",
]
