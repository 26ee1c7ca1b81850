"""Port for reading and writing the dashboard documents."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True, kw_only=True)
class DashboardDocuments:
    """Snapshot of the dashboard configuration.

    ``version`` is an opaque token from the store; a write carrying a stale
    version must fail with ``DocumentConflictError``.
    """

    services: str = ""
    settings: str = ""
    version: str | None = None

    def with_changes(self, *, services: str, settings: str) -> DashboardDocuments:
        return replace(self, services=services, settings=settings)


@runtime_checkable
class DashboardDocumentStore(Protocol):
    """Read-modify-write access to the persisted dashboard configuration."""

    async def read(self) -> DashboardDocuments: ...

    async def write(self, documents: DashboardDocuments) -> None: ...
