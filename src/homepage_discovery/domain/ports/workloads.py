"""Port for listing the workloads that may declare dashboard links."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from homepage_discovery.domain.discovery.model import WorkloadMetadata


@runtime_checkable
class WorkloadSource(Protocol):
    async def list_workloads(self) -> Sequence[WorkloadMetadata]: ...
