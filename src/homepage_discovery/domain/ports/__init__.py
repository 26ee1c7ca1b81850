"""Domain port definitions for adapters."""

from __future__ import annotations

from .documents import DashboardDocuments, DashboardDocumentStore
from .rollout import RolloutTrigger
from .workloads import WorkloadSource

__all__ = [
    "DashboardDocumentStore",
    "DashboardDocuments",
    "RolloutTrigger",
    "WorkloadSource",
]
