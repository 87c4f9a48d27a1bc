"""
InstallQueue: bounded-concurrency FIFO scheduler for installs.

At most ``max_concurrent`` units run at once. Draining is always deferred to
the next event-loop tick, so a burst of completions never recurses.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

import structlog

from lspinstall.core.constants import DEFAULT_MAX_CONCURRENT

logger = structlog.get_logger()

T = TypeVar("T")


class InstallQueue(Generic[T]):
    def __init__(
        self,
        start: Callable[[T], Awaitable[None]],
        *,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        key: Callable[[T], Hashable] = id,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._start = start
        self._max_concurrent = max_concurrent
        self._key = key
        self._pending: deque[T] = deque()
        self._running = 0
        self._tasks: dict[Hashable, asyncio.Task[None]] = {}

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def running(self) -> int:
        return self._running

    @property
    def tasks(self) -> dict[Hashable, asyncio.Task[None]]:
        """Running tasks keyed by unit identity."""
        return dict(self._tasks)

    def enqueue(self, unit: T) -> None:
        """Append *unit* and schedule a drain. Must be called with a running event loop."""
        self._pending.append(unit)
        self._schedule_drain()

    def _schedule_drain(self) -> None:
        asyncio.get_running_loop().call_soon(self._drain)

    def _drain(self) -> None:
        while self._running < self._max_concurrent and self._pending:
            unit = self._pending.popleft()
            self._running += 1
            unit_key = self._key(unit)
            task = asyncio.get_running_loop().create_task(self._run(unit, unit_key))
            self._tasks[unit_key] = task

    async def _run(self, unit: T, unit_key: Hashable) -> None:
        try:
            await self._start(unit)
        except Exception:  # noqa: BLE001
            logger.exception("install_task_crashed", unit=str(unit_key))
        finally:
            self._running -= 1
            self._tasks.pop(unit_key, None)
            self._schedule_drain()

    async def join(self) -> None:
        """Wait until nothing is pending or running."""
        while self._pending or self._running:
            tasks = list(self._tasks.values())
            if tasks:
                await asyncio.wait(tasks)
            await asyncio.sleep(0)
