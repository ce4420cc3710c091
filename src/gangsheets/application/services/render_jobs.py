"""Background execution of gangsheet render jobs."""

from __future__ import annotations

import asyncio
import logging
from typing import Coroutine, Literal

logger = logging.getLogger(__name__)

RenderMode = Literal["background", "inline"]


class RenderJobRunner:
    """Runs render coroutines as tracked ``asyncio`` tasks.

    Tasks are kept in a registry keyed by gangsheet id until they finish, so
    they are not garbage collected mid-flight, can be cancelled by id and can
    be drained on shutdown. In ``inline`` mode jobs are awaited directly,
    which the CLI and tests use to get a finished gangsheet back.

    Args:
        mode: ``background`` to schedule tasks, ``inline`` to await them.
    """

    def __init__(self, mode: RenderMode = "background") -> None:
        self.mode = mode
        self._tasks: dict[int, asyncio.Task[None]] = {}

    async def submit(
        self, gangsheet_id: int, job: Coroutine[object, object, None]
    ) -> None:
        """Run or schedule ``job`` for ``gangsheet_id``."""
        if self.mode == "inline":
            await job
            return

        task = asyncio.create_task(job, name=f"render-gangsheet-{gangsheet_id}")
        self._tasks[gangsheet_id] = task
        task.add_done_callback(lambda _: self._forget(gangsheet_id, task))
        logger.debug("Scheduled render job for gangsheet %d", gangsheet_id)

    def is_running(self, gangsheet_id: int) -> bool:
        task = self._tasks.get(gangsheet_id)
        return task is not None and not task.done()

    @property
    def active(self) -> int:
        """Number of jobs that have not finished yet."""
        return sum(1 for task in self._tasks.values() if not task.done())

    async def cancel(self, gangsheet_id: int) -> bool:
        """Cancel the job for ``gangsheet_id`` and wait for it to unwind.

        Returns:
            True if a running job was cancelled.
        """
        task = self._tasks.get(gangsheet_id)
        if task is None or task.done():
            return False
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        logger.info("Cancelled render job for gangsheet %d", gangsheet_id)
        return True

    async def wait_all(self) -> None:
        """Wait until every scheduled job has finished."""
        pending = list(self._tasks.values())
        if pending:
            logger.info("Waiting for %d render jobs", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every scheduled job and wait for them to unwind."""
        for gangsheet_id in list(self._tasks):
            await self.cancel(gangsheet_id)

    def _forget(self, gangsheet_id: int, task: asyncio.Task[None]) -> None:
        if self._tasks.get(gangsheet_id) is task:
            del self._tasks[gangsheet_id]
