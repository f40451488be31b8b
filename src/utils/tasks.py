"""
Scheduler for detached background tasks.

Background revalidation is fire-and-forget: the request that starts it
returns without awaiting it. The scheduler keeps a reference to each
running task so it is not garbage-collected mid-flight, logs failures,
and lets tests (or shutdown) wait for everything in flight with drain().
"""
import asyncio
from typing import Any, Coroutine, Optional, Set

from src.utils.logger import get_logger

logger = get_logger(__name__)


class TaskScheduler:
    """
    Tracks detached asyncio tasks.

    Attributes:
        spawned: Total number of tasks started

    Example:
        >>> scheduler = TaskScheduler()
        >>> scheduler.spawn(revalidate(request), name="revalidate")
        >>> await scheduler.drain()  # in tests: force completion
    """

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()
        self.spawned = 0

    def spawn(
        self,
        coro: Coroutine[Any, Any, Any],
        name: Optional[str] = None,
    ) -> asyncio.Task:
        """
        Start a coroutine without awaiting it.

        Args:
            coro: Coroutine to run in the background
            name: Optional task name for logs

        Returns:
            The created task

        Raises:
            RuntimeError: If no event loop is running
        """
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        self.spawned += 1
        task.add_done_callback(self._task_done)
        logger.debug("detached_task_spawned", task=task.get_name())
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            logger.debug("detached_task_cancelled", task=task.get_name())
            return

        exc = task.exception()
        if exc is not None:
            logger.error(
                "detached_task_failed",
                task=task.get_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every task in flight (including ones they spawn) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every task in flight and wait for them to finish."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("detached_tasks_cancelled", count=len(tasks))
