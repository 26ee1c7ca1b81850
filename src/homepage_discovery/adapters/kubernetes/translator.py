"""Translate Kubernetes payloads into discovery domain values."""

from __future__ import annotations

from homepage_discovery.domain.discovery.model import WorkloadMetadata

from .schema import ServicePayload


def parse_workload(payload: ServicePayload | dict[str, object]) -> WorkloadMetadata:
    service = (
        payload if isinstance(payload, ServicePayload) else ServicePayload.model_validate(payload)
    )
    metadata = service.metadata
    return WorkloadMetadata(
        name=metadata.name,
        namespace=metadata.namespace,
        annotations=dict(metadata.annotations),
    )
