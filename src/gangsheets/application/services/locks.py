"""Per-gangsheet write serialization."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator


class GangsheetLockRegistry:
    """Hands out one ``asyncio.Lock`` per gangsheet id.

    Status updates, progress updates and deletion of the same gangsheet are
    run under its lock so they never interleave within a process. Writers in
    other processes are caught by the datastore's version column instead.
    """

    def __init__(self) -> None:
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._holders: defaultdict[int, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, gangsheet_id: int) -> AsyncIterator[None]:
        """Hold the lock for ``gangsheet_id`` for the duration of the block."""
        lock = self._locks[gangsheet_id]
        self._holders[gangsheet_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[gangsheet_id] -= 1
            if self._holders[gangsheet_id] == 0:
                del self._holders[gangsheet_id]
                self._locks.pop(gangsheet_id, None)

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, gangsheet_id: object) -> bool:
        return gangsheet_id in self._locks
