"""Per-project mutual exclusion for history-mutating operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProjectLockTable:
    """Lazily created asyncio.Lock per project id.

    Locks are never removed: project ids are few and long-lived. Waiters on the
    same project are served in arrival order (asyncio.Lock is FIFO); different
    projects never contend. Only serializes within one process.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}

    def _lock_for(self, project_id: int) -> asyncio.Lock:
        # no await between lookup and insert, so this is atomic on the loop
        lock = self._locks.get(project_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[project_id] = lock
        return lock

    def is_locked(self, project_id: int) -> bool:
        lock = self._locks.get(project_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, project_id: int) -> AsyncIterator[None]:
        lock = self._lock_for(project_id)
        if lock.locked():
            logger.debug("Waiting for lock on project %s", project_id)
        async with lock:
            yield

    async def run_exclusive(self, project_id: int, body: Callable[[], Awaitable[T]]) -> T:
        """Run body while holding the project's lock; released on every exit path."""
        async with self.hold(project_id):
            return await body()
