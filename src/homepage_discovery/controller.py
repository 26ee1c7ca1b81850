"""Long-running controller: watch, resync and a debounced reconcile worker."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    wait_exponential_jitter,
)

from homepage_discovery.domain.discovery.errors import DiscoveryError, WorkloadSourceError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from tenacity.wait import wait_base

    from homepage_discovery.domain.discovery.reconcile import ReconcileDriver, ReconcileOutcome

log = getLogger(__name__)


class ReconcileQueue:
    """Bounded queue that coalesces change notifications.

    At most ``maxsize`` notifications wait; any further ones are folded into the
    pending reconcile. After the first notification of a batch the consumer waits
    ``debounce_seconds`` and drains everything that arrived in the meantime.
    """

    def __init__(self, *, debounce_seconds: float = 0.0, maxsize: int = 1) -> None:
        self.debounce_seconds = debounce_seconds
        self.coalesced = 0
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=maxsize)

    def notify(self, reason: str) -> bool:
        """Enqueue ``reason``; return ``False`` if it was merged into a pending one."""

        try:
            self._queue.put_nowait(reason)
        except asyncio.QueueFull:
            self.coalesced += 1
            return False
        return True

    def pending(self) -> int:
        return self._queue.qsize()

    async def next_batch(self) -> list[str]:
        reasons = [await self._queue.get()]
        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        while not self._queue.empty():
            reasons.append(self._queue.get_nowait())
        return reasons


def _default_watch_wait() -> wait_base:
    return wait_exponential_jitter(initial=1.0, max=60.0)


@dataclass(slots=True)
class DiscoveryController:
    """Feeds notifications from ``changes`` and a resync timer into one worker."""

    driver: ReconcileDriver
    changes: Callable[[], AsyncIterator[str]]
    queue: ReconcileQueue = field(default_factory=ReconcileQueue)
    resync_seconds: float = 0.0
    watch_wait: wait_base = field(default_factory=_default_watch_wait)

    async def run(self, stop: asyncio.Event) -> None:
        """Run until ``stop`` is set."""

        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(self._watch(), name="watch"),
                group.create_task(self._work(), name="reconcile"),
            ]
            if self.resync_seconds > 0:
                tasks.append(group.create_task(self._resync(), name="resync"))
            log.info("Controller running...")
            await stop.wait()
            log.info("Shutting down...")
            for task in tasks:
                task.cancel()

    async def reconcile_batch(self, reasons: list[str]) -> ReconcileOutcome | None:
        """Reconcile once for a batch of notifications; failures wait for the next one."""

        log.debug("Reconciling after %d notifications: %s", len(reasons), ", ".join(reasons))
        try:
            outcome = await self.driver.reconcile()
        except DiscoveryError:
            log.exception("Reconcile failed, waiting for the next change")
            return None
        log.info(
            "Reconciled: groups=%d, entities=%d, skipped=%d, written=%s",
            len(outcome.groups),
            outcome.entities,
            outcome.skipped,
            outcome.written,
        )
        return outcome

    async def _watch(self) -> None:
        retrying = AsyncRetrying(
            wait=self.watch_wait,
            retry=retry_if_exception_type(WorkloadSourceError),
            before_sleep=before_sleep_log(log, logging.WARNING),
        )
        async for attempt in retrying:
            with attempt:
                async for reason in self.changes():
                    self.queue.notify(reason)

    async def _resync(self) -> None:
        while True:
            await asyncio.sleep(self.resync_seconds)
            self.queue.notify("resync")

    async def _work(self) -> None:
        while True:
            reasons = await self.queue.next_batch()
            await self.reconcile_batch(reasons)
