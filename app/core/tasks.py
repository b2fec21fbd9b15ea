"""Fire-and-forget asyncio tasks that outlive the request which started them."""

import asyncio
import logging
from typing import Coroutine

logger = logging.getLogger(__name__)


class TaskRunner:
    """
    Keeps strong references to spawned tasks until they finish.

    The event loop only holds weak references to tasks, so a task created
    with ``asyncio.create_task`` and then dropped can be garbage collected
    mid-flight.

    ``spawn`` may also be called from a worker thread once the runner knows
    its loop (via ``bind`` or an earlier on-loop spawn). The task is then
    created on that loop with ``call_soon_threadsafe`` and ``spawn`` returns
    None.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def spawn(self, coro: Coroutine, name: str | None = None) -> asyncio.Task | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            self._loop = loop
            return self._create(coro, name)

        if self._loop is None or self._loop.is_closed():
            coro.close()
            raise RuntimeError("TaskRunner has no event loop to schedule on")
        self._loop.call_soon_threadsafe(self._create, coro, name)
        return None

    def _create(self, coro: Coroutine, name: str | None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed: %s",
                task.get_name(),
                exc,
                exc_info=exc,
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every spawned task, including ones spawned meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
