"""Tests for the sequential work queue."""

import asyncio

import pytest

from hydration_tracker.services.work_queue import WorkQueue


def test_operations_run_in_submission_order() -> None:
    order: list[str] = []

    async def step(name: str, delay: float) -> str:
        await asyncio.sleep(delay)
        order.append(name)
        return name

    async def scenario() -> list[str]:
        queue = WorkQueue()
        futures = [
            queue.submit(lambda: step("slow", 0.02), label="slow"),
            queue.submit(lambda: step("fast", 0.0), label="fast"),
        ]
        results = await asyncio.gather(*futures)
        await queue.close()
        return results

    assert asyncio.run(scenario()) == ["slow", "fast"]
    assert order == ["slow", "fast"]


def test_failure_is_delivered_to_future_and_queue_keeps_running() -> None:
    async def boom() -> None:
        raise ValueError("bad")

    async def ok() -> int:
        return 1

    async def scenario() -> int:
        queue = WorkQueue()
        failed = queue.submit(boom, label="boom")
        succeeded = queue.submit(ok, label="ok")
        with pytest.raises(ValueError):
            await failed
        result = await succeeded
        await queue.close()
        return result

    assert asyncio.run(scenario()) == 1


def test_cancelled_operation_cancels_its_future_only() -> None:
    async def interrupted() -> None:
        raise asyncio.CancelledError

    async def ok() -> int:
        return 2

    async def scenario() -> int:
        queue = WorkQueue()
        cancelled = queue.submit(interrupted, label="interrupted")
        await asyncio.wait([cancelled], timeout=1)
        assert cancelled.cancelled()

        result = await queue.submit(ok, label="ok")
        await queue.close()
        return result

    assert asyncio.run(scenario()) == 2


def test_close_drains_pending_work_and_rejects_new_submissions() -> None:
    done: list[int] = []

    async def record(value: int) -> None:
        await asyncio.sleep(0)
        done.append(value)

    async def scenario() -> None:
        queue = WorkQueue()
        queue.submit(lambda: record(1), label="one")
        queue.submit(lambda: record(2), label="two")
        await queue.close()
        with pytest.raises(RuntimeError):
            queue.submit(lambda: record(3), label="three")

    asyncio.run(scenario())
    assert done == [1, 2]
