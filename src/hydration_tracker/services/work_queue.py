"""Sequential queue for background mutations."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

_logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[Any]]
_Job = tuple[str, Operation, "asyncio.Future[Any]"]


class WorkQueue:
    """Runs submitted operations one at a time in FIFO order.

    Callers get a future for each operation and never block on the work
    itself. The consumer task starts lazily on the running event loop.
    """

    def __init__(self, name: str = "hydration-work") -> None:
        self.name = name
        self._queue: asyncio.Queue[_Job | None] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._closing = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def submit(self, operation: Operation, *, label: str) -> "asyncio.Future[Any]":
        """Enqueue an operation and return a future for its result."""
        if self._closing:
            raise RuntimeError(f"Work queue {self.name} is closed")
        loop = asyncio.get_running_loop()
        if self._worker is None:
            self._worker = loop.create_task(self._run(), name=self.name)
        future: asyncio.Future[Any] = loop.create_future()
        self._queue.put_nowait((label, operation, future))
        return future

    async def join(self) -> None:
        """Wait until every submitted operation has finished."""
        await self._queue.join()

    async def close(self) -> None:
        """Finish pending operations and stop the consumer task."""
        self._closing = True
        if self._worker is None:
            return
        self._queue.put_nowait(None)
        await self._worker
        self._worker = None

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                if job is None:
                    return
                label, operation, future = job
                if future.cancelled():
                    continue
                _logger.debug("Work queue %s running %s", self.name, label)
                try:
                    result = await operation()
                except asyncio.CancelledError:
                    future.cancel()
                    worker = asyncio.current_task()
                    if worker is not None and worker.cancelling():
                        raise
                    _logger.info("Work queue %s: %s was cancelled", self.name, label)
                except Exception as exc:
                    if not future.cancelled():
                        future.set_exception(exc)
                else:
                    if not future.cancelled():
                        future.set_result(result)
            finally:
                self._queue.task_done()
