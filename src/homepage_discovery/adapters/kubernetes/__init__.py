"""Public interface for the Kubernetes adapter."""

from __future__ import annotations

from .client import KubernetesAPIError, KubernetesClient
from .documents import ConfigMapDocumentStore
from .rollout import DeploymentRolloutTrigger, restart_patch
from .schema import ConfigMapPayload, ServiceListPayload, ServicePayload, WatchEvent
from .sources import ServiceWorkloadSource
from .translator import parse_workload

__all__ = [
    "ConfigMapDocumentStore",
    "ConfigMapPayload",
    "DeploymentRolloutTrigger",
    "KubernetesAPIError",
    "KubernetesClient",
    "ServiceListPayload",
    "ServicePayload",
    "ServiceWorkloadSource",
    "WatchEvent",
    "parse_workload",
    "restart_patch",
]
