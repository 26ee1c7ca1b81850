"""ConfigMap-backed storage for the dashboard documents."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from homepage_discovery.domain.discovery.errors import DocumentConflictError, DocumentStoreError
from homepage_discovery.domain.discovery.serialization import SERVICES_DOCUMENT, SETTINGS_DOCUMENT
from homepage_discovery.domain.ports import DashboardDocuments

from .client import KubernetesAPIError

if TYPE_CHECKING:
    from .client import KubernetesClient

log = getLogger(__name__)


@dataclass(slots=True)
class ConfigMapDocumentStore:
    """Reads and writes ``services.yaml``/``settings.yaml`` of one ConfigMap.

    Writes are conditional on the resource version that was read.
    """

    client: KubernetesClient
    namespace: str
    name: str

    async def read(self) -> DashboardDocuments:
        try:
            config_map = await self.client.get_configmap(namespace=self.namespace, name=self.name)
        except KubernetesAPIError as exc:
            raise DocumentStoreError(f"failed to get ConfigMap: {exc}") from exc
        return DashboardDocuments(
            services=config_map.data.get(SERVICES_DOCUMENT, ""),
            settings=config_map.data.get(SETTINGS_DOCUMENT, ""),
            version=config_map.metadata.resource_version,
        )

    async def write(self, documents: DashboardDocuments) -> None:
        data = {SERVICES_DOCUMENT: documents.services}
        if documents.settings:
            data[SETTINGS_DOCUMENT] = documents.settings
        try:
            await self.client.patch_configmap_data(
                namespace=self.namespace,
                name=self.name,
                data=data,
                resource_version=documents.version,
            )
        except KubernetesAPIError as exc:
            if exc.is_conflict:
                raise DocumentConflictError(
                    f"ConfigMap {self.namespace}/{self.name} changed since it was read"
                ) from exc
            raise DocumentStoreError(f"failed to update ConfigMap: {exc}") from exc
        log.debug("Wrote ConfigMap %s/%s", self.namespace, self.name)
