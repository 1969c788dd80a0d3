"""Observable value cells for publishing state snapshots."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing, suppress
from typing import Generic, TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)

_CLOSED = object()


class ObservableValue(Generic[T]):
    """Holds the latest value and broadcasts every update to subscribers.

    New subscribers receive the current value immediately, followed by each
    later update in publish order. Each subscriber has its own unbounded
    queue, so a slow reader never drops values.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._queues: set[asyncio.Queue[object]] = set()
        self._closed = False

    @property
    def value(self) -> T:
        """Return the latest published value."""
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)

    def publish(self, value: T) -> None:
        """Store a new value and deliver it to every subscriber."""
        self._value = value
        for queue in self._queues:
            queue.put_nowait(value)

    async def subscribe(self) -> AsyncIterator[T]:
        """Yield the current value, then every later update."""
        if self._closed:
            return
        queue: asyncio.Queue[object] = asyncio.Queue()
        queue.put_nowait(self._value)
        self._queues.add(queue)
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield item  # type: ignore[misc]
        finally:
            self._queues.discard(queue)

    def close(self) -> None:
        """End all subscriptions after their pending values are delivered."""
        self._closed = True
        for queue in self._queues:
            queue.put_nowait(_CLOSED)


class SharedState(Generic[T]):
    """Caches an upstream stream's latest value while observers are attached.

    The upstream is collected from the first attached observer until
    ``grace_seconds`` after the last one detaches. The cached value stays
    readable through ``value`` while the upstream is stopped.
    """

    def __init__(
        self,
        name: str,
        upstream: Callable[[], AsyncIterator[T]],
        initial: T,
        grace_seconds: float = 5.0,
    ) -> None:
        self.name = name
        self._upstream = upstream
        self._grace_seconds = grace_seconds
        self._cell: ObservableValue[T] = ObservableValue(initial)
        self._task: asyncio.Task[None] | None = None
        self._stop_handle: asyncio.TimerHandle | None = None
        self._observers = 0
        self._closed = False

    @property
    def value(self) -> T:
        return self._cell.value

    @property
    def active(self) -> bool:
        """Return True while the upstream is being collected."""
        return self._task is not None and not self._task.done()

    @property
    def observers(self) -> int:
        return self._observers

    async def observe(self) -> AsyncIterator[T]:
        """Yield the cached value, then every upstream change."""
        if self._closed:
            return
        self._attach()
        try:
            async with aclosing(self._cell.subscribe()) as values:
                async for value in values:
                    yield value
        finally:
            self._detach()

    async def close(self) -> None:
        """Stop the upstream immediately and end observers."""
        self._closed = True
        if self._stop_handle is not None:
            self._stop_handle.cancel()
            self._stop_handle = None
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._cell.close()

    def _attach(self) -> None:
        self._observers += 1
        if self._stop_handle is not None:
            self._stop_handle.cancel()
            self._stop_handle = None
        if not self._closed and not self.active:
            self._task = asyncio.get_running_loop().create_task(
                self._collect(), name=f"shared-state-{self.name}"
            )

    def _detach(self) -> None:
        self._observers -= 1
        if self._observers > 0 or self._task is None:
            return
        loop = asyncio.get_running_loop()
        self._stop_handle = loop.call_later(self._grace_seconds, self._stop)

    def _stop(self) -> None:
        self._stop_handle = None
        task, self._task = self._task, None
        if task is not None:
            _logger.debug("Stopping upstream for %s", self.name)
            task.cancel()

    async def _collect(self) -> None:
        try:
            async with aclosing(self._upstream()) as values:
                async for value in values:
                    if value != self._cell.value:
                        self._cell.publish(value)
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.exception("Upstream for %s failed", self.name)
