"""Port for restarting the dashboard after its configuration changed."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RolloutTrigger(Protocol):
    async def __call__(self) -> None: ...
