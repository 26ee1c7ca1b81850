"""Reconcile driver: discovered workloads in, dashboard documents out.

One call to :meth:`ReconcileDriver.reconcile` runs the whole pipeline:

1) list workloads from the source port
2) extract one entity per opted-in workload
3) collect entities into sorted groups and claim their names
4) merge the groups into ``services.yaml``
5) append layout blocks for the groups to ``settings.yaml``
6) write both documents when ``services.yaml`` changed
7) trigger a rollout of the dashboard, best effort

Steps 4 to 6 re-run against freshly read documents when the store reports a
conflict or a transient failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .collect import CollectedGroups, collect_groups
from .errors import DocumentStoreError, MalformedDocumentError, RolloutError
from .extract import extract_entity
from .layout import LayoutSyncResult, sync_layout_document
from .merge import MergeResult, merge_document
from .model import OwnedGroupSet

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tenacity.wait import wait_base

    from homepage_discovery.domain.ports import (
        DashboardDocuments,
        DashboardDocumentStore,
        RolloutTrigger,
        WorkloadSource,
    )

    from .model import WorkloadMetadata

log = getLogger(__name__)

DEFAULT_WRITE_ATTEMPTS = 5


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconcilePlan:
    collected: CollectedGroups
    services: MergeResult
    layout: LayoutSyncResult
    documents: DashboardDocuments

    @property
    def changed(self) -> bool:
        return self.services.changed


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconcileOutcome:
    """Summary of one reconcile run."""

    changed: bool
    written: bool
    groups: tuple[str, ...]
    entities: int
    skipped: int
    layout_added: tuple[str, ...]
    documents: DashboardDocuments
    restarted: bool = False
    rollout_error: str | None = None


def plan_reconcile(
    workloads: Sequence[WorkloadMetadata],
    documents: DashboardDocuments,
    owned: OwnedGroupSet,
) -> ReconcilePlan:
    """Compute the next documents for ``workloads`` without any I/O.

    ``owned`` is updated with this run's group names before merging.
    """

    collected = collect_groups(extract_entity(workload) for workload in workloads)
    claimed = owned.claim(collected.group_names)
    if claimed:
        log.info("Managing discovered groups: %s", ", ".join(sorted(claimed)))

    services = merge_document(documents.services, collected.groups, owned)
    layout = LayoutSyncResult(text=documents.settings)
    if services.changed:
        try:
            layout = sync_layout_document(documents.settings, collected.group_names)
        except MalformedDocumentError as exc:
            log.warning("Failed to update settings layout: %s", exc)

    return ReconcilePlan(
        collected=collected,
        services=services,
        layout=layout,
        documents=documents.with_changes(services=services.text, settings=layout.text),
    )


def _default_wait() -> wait_base:
    return wait_exponential_jitter(initial=0.5, max=10.0, jitter=0.5)


@dataclass(slots=True)
class ReconcileDriver:
    """Runs reconciles against one dashboard and keeps the groups it owns."""

    source: WorkloadSource
    store: DashboardDocumentStore
    rollout: RolloutTrigger | None = None
    owned: OwnedGroupSet = field(default_factory=OwnedGroupSet)
    write_attempts: int = DEFAULT_WRITE_ATTEMPTS
    wait: wait_base = field(default_factory=_default_wait)

    async def reconcile(self, *, dry_run: bool = False) -> ReconcileOutcome:
        """Run one reconcile.

        Raises ``WorkloadSourceError`` or ``MalformedDocumentError`` immediately and
        ``DocumentStoreError`` once all write attempts are used up. A failed rollout
        is reported in the outcome instead.
        """

        workloads = await self.source.list_workloads()
        plan = await self._read_merge_write(workloads, dry_run=dry_run)
        outcome = ReconcileOutcome(
            changed=plan.changed,
            written=plan.changed and not dry_run,
            groups=plan.collected.group_names,
            entities=plan.collected.entity_count,
            skipped=len(plan.collected.skipped),
            layout_added=plan.layout.added,
            documents=plan.documents,
        )
        if not outcome.written:
            return outcome

        log.info("Updated ConfigMap with %d groups", len(outcome.groups))
        if self.rollout is None:
            return outcome
        try:
            await self.rollout()
        except RolloutError as exc:
            log.warning("Error restarting homepage: %s", exc)
            return replace(outcome, rollout_error=str(exc))
        return replace(outcome, restarted=True)

    async def _read_merge_write(
        self,
        workloads: Sequence[WorkloadMetadata],
        *,
        dry_run: bool,
    ) -> ReconcilePlan:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.write_attempts),
            wait=self.wait,
            retry=retry_if_exception_type(DocumentStoreError),
            before_sleep=before_sleep_log(log, logging.WARNING),
            reraise=True,
        )
        plan: ReconcilePlan | None = None
        async for attempt in retrying:
            with attempt:
                documents = await self.store.read()
                plan = plan_reconcile(workloads, documents, self.owned)
                if plan.changed and not dry_run:
                    await self.store.write(plan.documents)
        if plan is None:
            raise RuntimeError("Reconcile finished without a plan")
        return plan

