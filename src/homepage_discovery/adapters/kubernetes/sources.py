"""Services as the workload source, with a relisting watch."""

from __future__ import annotations

from contextlib import aclosing
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from homepage_discovery.domain.discovery.errors import WorkloadSourceError

from .client import KubernetesAPIError
from .translator import parse_workload

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from homepage_discovery.domain.discovery.model import WorkloadMetadata

    from .client import KubernetesClient

log = getLogger(__name__)


@dataclass(slots=True)
class ServiceWorkloadSource:
    """Lists Services, cluster-wide unless ``namespace`` is set."""

    client: KubernetesClient
    namespace: str | None = None

    async def list_workloads(self) -> list[WorkloadMetadata]:
        try:
            services = await self.client.list_services(namespace=self.namespace)
        except KubernetesAPIError as exc:
            raise WorkloadSourceError(f"Error listing services: {exc}") from exc
        return [parse_workload(item) for item in services.items]

    async def changes(self) -> AsyncIterator[str]:
        """Yield one notification per observed change, forever.

        Lists once to learn the current resource version, then watches from it. The
        stream is re-established from the last seen version when the server closes
        it, and relisted when that version has expired. Errors propagate so the
        caller decides how to back off.
        """

        resource_version: str | None = None
        while True:
            if resource_version is None:
                try:
                    listing = await self.client.list_services(namespace=self.namespace)
                except KubernetesAPIError as exc:
                    raise WorkloadSourceError(f"Error listing services: {exc}") from exc
                resource_version = listing.metadata.resource_version
                yield "relist"

            try:
                events = self.client.watch_services(
                    namespace=self.namespace,
                    resource_version=resource_version,
                )
                async with aclosing(events):
                    async for event in events:
                        if event.type == "ERROR":
                            status = event.status()
                            log.info(
                                "Watch expired (%s %s), relisting", status.code, status.reason
                            )
                            resource_version = None
                            break
                        resource_version = event.resource_version() or resource_version
                        if event.type == "BOOKMARK":
                            continue
                        yield event.type
            except KubernetesAPIError as exc:
                if not exc.is_gone:
                    raise WorkloadSourceError(f"Error watching services: {exc}") from exc
                log.info("Watch resource version expired, relisting")
                resource_version = None
