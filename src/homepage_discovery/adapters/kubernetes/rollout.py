"""Rolling restart of the dashboard Deployment."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from homepage_discovery.domain.discovery.errors import RolloutError

from .client import KubernetesAPIError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .client import KubernetesClient

log = getLogger(__name__)

RESTARTED_AT_ANNOTATION: Final[str] = "homepage-discovery/restartedAt"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def restart_patch(at: datetime) -> dict[str, object]:
    """Pod template patch that forces a new ReplicaSet."""

    timestamp = at.astimezone(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return {
        "spec": {
            "template": {
                "metadata": {"annotations": {RESTARTED_AT_ANNOTATION: timestamp}},
            }
        }
    }


@dataclass(slots=True)
class DeploymentRolloutTrigger:
    client: KubernetesClient
    namespace: str
    name: str
    now_provider: Callable[[], datetime] = field(default=_utcnow)

    async def __call__(self) -> None:
        try:
            await self.client.patch_deployment(
                namespace=self.namespace,
                name=self.name,
                patch=restart_patch(self.now_provider()),
            )
        except KubernetesAPIError as exc:
            raise RolloutError(str(exc)) from exc
        log.info("Triggered homepage restart")
