"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import signal
from logging import getLogger
from typing import TYPE_CHECKING

from homepage_discovery.adapters.kubernetes import (
    ConfigMapDocumentStore,
    DeploymentRolloutTrigger,
    KubernetesClient,
    ServiceWorkloadSource,
)
from homepage_discovery.config import (
    ClusterConfig,
    ControllerConfig,
    get_cluster_config,
    get_controller_config,
)
from homepage_discovery.controller import DiscoveryController, ReconcileQueue
from homepage_discovery.domain.discovery.reconcile import ReconcileDriver

if TYPE_CHECKING:
    from homepage_discovery.domain.discovery.reconcile import ReconcileOutcome

log = getLogger(__name__)


def build_driver(
    config: ControllerConfig,
    client: KubernetesClient,
    *,
    source: ServiceWorkloadSource | None = None,
) -> ReconcileDriver:
    rollout = (
        DeploymentRolloutTrigger(
            client=client,
            namespace=config.homepage_namespace,
            name=config.homepage_deployment,
        )
        if config.restart_homepage
        else None
    )
    return ReconcileDriver(
        source=source or ServiceWorkloadSource(client=client, namespace=config.watch_namespace),
        store=ConfigMapDocumentStore(
            client=client,
            namespace=config.homepage_namespace,
            name=config.homepage_configmap,
        ),
        rollout=rollout,
        write_attempts=config.write_attempts,
    )


async def reconcile_once(
    *,
    config: ControllerConfig | None = None,
    cluster: ClusterConfig | None = None,
    dry_run: bool = False,
) -> ReconcileOutcome:
    """Run a single reconcile against the cluster."""

    effective_config = config or get_controller_config()
    async with KubernetesClient.from_cluster_config(cluster or get_cluster_config()) as client:
        driver = build_driver(effective_config, client)
        return await driver.reconcile(dry_run=dry_run)


async def run_controller(
    *,
    config: ControllerConfig | None = None,
    cluster: ClusterConfig | None = None,
    stop: asyncio.Event | None = None,
) -> None:
    """Watch Services and reconcile until SIGINT/SIGTERM or ``stop`` is set."""

    effective_config = config or get_controller_config()
    effective_cluster = cluster or get_cluster_config()
    stop_event = stop or asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop_event.set)

    log.info(
        "Homepage discovery controller starting: configmap=%s/%s, restart=%s, namespace=%s",
        effective_config.homepage_namespace,
        effective_config.homepage_configmap,
        effective_config.restart_homepage,
        effective_config.watch_namespace or "<all>",
    )
    try:
        async with KubernetesClient.from_cluster_config(effective_cluster) as client:
            source = ServiceWorkloadSource(
                client=client, namespace=effective_config.watch_namespace
            )
            controller = DiscoveryController(
                driver=build_driver(effective_config, client, source=source),
                changes=source.changes,
                queue=ReconcileQueue(debounce_seconds=effective_config.debounce_seconds),
                resync_seconds=effective_config.resync_seconds,
            )
            await controller.run(stop_event)
    finally:
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(signum)
