from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from tenacity import wait_none

from homepage_discovery.controller import DiscoveryController, ReconcileQueue
from homepage_discovery.domain.discovery import ReconcileDriver, WorkloadSourceError
from tests.helpers.discovery import FakeDocumentStore, FakeWorkloadSource, make_workload

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import pytest


def _driver(source: FakeWorkloadSource, store: FakeDocumentStore) -> ReconcileDriver:
    return ReconcileDriver(source=source, store=store, wait=wait_none())


def test_queue_coalesces_burst_into_one_batch() -> None:
    queue = ReconcileQueue(debounce_seconds=0.01)

    async def scenario() -> list[str]:
        accepted = [queue.notify(f"event-{index}") for index in range(5)]
        assert accepted == [True, False, False, False, False]
        return await queue.next_batch()

    assert asyncio.run(scenario()) == ["event-0"]
    assert queue.coalesced == 4
    assert queue.pending() == 0


def test_queue_collects_notifications_during_debounce() -> None:
    queue = ReconcileQueue(debounce_seconds=0.05, maxsize=10)

    async def scenario() -> list[str]:
        queue.notify("first")
        batch = asyncio.create_task(queue.next_batch())
        await asyncio.sleep(0.01)
        queue.notify("second")
        queue.notify("third")
        return await batch

    assert asyncio.run(scenario()) == ["first", "second", "third"]


def test_reconcile_batch_logs_and_survives_failures(caplog: pytest.LogCaptureFixture) -> None:
    source = FakeWorkloadSource(error="forbidden")
    controller = DiscoveryController(
        driver=_driver(source, FakeDocumentStore()),
        changes=_no_changes,
    )

    outcome = asyncio.run(controller.reconcile_batch(["relist"]))

    assert outcome is None
    assert "Reconcile failed" in caplog.text


def test_controller_reconciles_bursts_once_and_stops() -> None:
    source = FakeWorkloadSource([make_workload("a", href="/a")])
    store = FakeDocumentStore()
    watch_failures = [WorkloadSourceError("watch dropped")]

    async def changes() -> AsyncIterator[str]:
        if watch_failures:
            raise watch_failures.pop()
        for reason in ("relist", "ADDED", "MODIFIED", "MODIFIED"):
            yield reason
        await asyncio.Event().wait()

    controller = DiscoveryController(
        driver=_driver(source, store),
        changes=changes,
        queue=ReconcileQueue(debounce_seconds=0.01),
        watch_wait=wait_none(),
    )

    async def scenario() -> None:
        stop = asyncio.Event()
        runner = asyncio.create_task(controller.run(stop))
        for _ in range(100):
            if store.writes:
                break
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.05)
        stop.set()
        await runner

    asyncio.run(scenario())

    assert source.calls == 1
    assert len(store.writes) == 1
    assert not watch_failures


def test_controller_resync_triggers_reconcile() -> None:
    source = FakeWorkloadSource([make_workload("a", href="/a")])
    store = FakeDocumentStore()
    controller = DiscoveryController(
        driver=_driver(source, store),
        changes=_no_changes,
        resync_seconds=0.01,
    )

    async def scenario() -> None:
        stop = asyncio.Event()
        runner = asyncio.create_task(controller.run(stop))
        for _ in range(100):
            if source.calls >= 2:
                break
            await asyncio.sleep(0.01)
        stop.set()
        await runner

    asyncio.run(scenario())

    assert source.calls >= 2
    assert len(store.writes) == 1


async def _no_changes() -> AsyncIterator[str]:
    await asyncio.Event().wait()
    yield "unreachable"
