"""Intake record store."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from hydration_tracker.domain.errors import (
    HydrationError,
    RecordNotFoundError,
    StorageError,
)
from hydration_tracker.domain.intake import IntakeRecord, validate_amount
from hydration_tracker.services.observable import ObservableValue

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class IntakeRepository(Protocol):
    """Persistence interface for intake records."""

    def list_records(self) -> list[IntakeRecord]:
        """Return all records, most recent first."""

    def insert_record(self, amount: float, timestamp: datetime) -> int:
        """Persist a new record and return its id."""

    def get_record(self, record_id: int) -> IntakeRecord | None:
        """Return a record by id, if present."""

    def update_amount(self, record_id: int, amount: float) -> None:
        """Replace the amount of an existing record."""

    def delete_record(self, record_id: int) -> None:
        """Remove a record."""


@dataclass
class IntakeStore:
    """Durable intake records published as whole-list snapshots."""

    repository: IntakeRepository
    _records: ObservableValue[tuple[IntakeRecord, ...]] = field(init=False)
    _loaded: bool = field(default=False, init=False)
    _lock: asyncio.Lock = field(init=False)

    def __post_init__(self) -> None:
        self._records = ObservableValue(())
        self._lock = asyncio.Lock()

    def snapshot(self) -> tuple[IntakeRecord, ...]:
        """Return the most recently published snapshot."""
        return self._records.value

    async def observe_all(self) -> AsyncIterator[tuple[IntakeRecord, ...]]:
        """Yield the current records, then a fresh snapshot after each change."""
        async with self._lock:
            if not self._loaded:
                await self._refresh()
        async with aclosing(self._records.subscribe()) as snapshots:
            async for records in snapshots:
                yield records

    async def add(self, amount: float, timestamp: datetime | None = None) -> int:
        """Persist a new intake record and return its id."""
        validate_amount(amount)
        recorded_at = timestamp or datetime.now(tz=UTC)
        async with self._lock:
            record_id = await self._call(
                "insert", self.repository.insert_record, float(amount), recorded_at
            )
            added = IntakeRecord(
                id=record_id, amount=float(amount), timestamp=recorded_at
            )
            await self._republish(lambda records: _insert_sorted(records, added))
        _logger.info("Added intake record id=%s amount=%s", record_id, amount)
        return record_id

    async def update(self, record_id: int, new_amount: float) -> IntakeRecord:
        """Replace a record's amount, keeping its id and timestamp."""
        validate_amount(new_amount)
        async with self._lock:
            existing = await self._call("get", self.repository.get_record, record_id)
            if existing is None:
                raise RecordNotFoundError(record_id)
            await self._call(
                "update", self.repository.update_amount, record_id, float(new_amount)
            )
            updated = replace(existing, amount=float(new_amount))
            await self._republish(
                lambda records: tuple(
                    updated if record.id == record_id else record for record in records
                )
            )
        _logger.info("Updated intake record id=%s amount=%s", record_id, new_amount)
        return updated

    async def delete(self, record_id: int) -> None:
        """Remove a record by id."""
        async with self._lock:
            existing = await self._call("get", self.repository.get_record, record_id)
            if existing is None:
                raise RecordNotFoundError(record_id)
            await self._call("delete", self.repository.delete_record, record_id)
            await self._republish(
                lambda records: tuple(
                    record for record in records if record.id != record_id
                )
            )
        _logger.info("Deleted intake record id=%s", record_id)

    def close(self) -> None:
        """End all open snapshot subscriptions."""
        self._records.close()

    async def _refresh(self) -> None:
        records = await self._call("list", self.repository.list_records)
        self._records.publish(tuple(records))
        self._loaded = True

    async def _republish(
        self,
        patch: Callable[[tuple[IntakeRecord, ...]], tuple[IntakeRecord, ...]],
    ) -> None:
        # Runs after a successful write, so a failed re-read is not a failed mutation.
        try:
            await self._refresh()
        except StorageError:
            _logger.warning("Publishing local snapshot; next observer reloads")
            self._records.publish(patch(self._records.value))
            self._loaded = False

    async def _call(self, action: str, func: Callable[..., T], *args: object) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except HydrationError:
            raise
        except Exception as exc:
            _logger.warning("Intake storage %s failed: %s", action, exc)
            raise StorageError(f"Intake storage {action} failed: {exc}") from exc


def _insert_sorted(
    records: tuple[IntakeRecord, ...], added: IntakeRecord
) -> tuple[IntakeRecord, ...]:
    return tuple(
        sorted(
            (*records, added),
            key=lambda record: (record.timestamp, record.id),
            reverse=True,
        )
    )
