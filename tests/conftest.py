"""Shared test fixtures."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from hydration_tracker.adapters.tips_client import TipsClient
from hydration_tracker.config import Settings
from hydration_tracker.containers import AppContainer
from hydration_tracker.domain.intake import IntakeRecord
from hydration_tracker.services.coordinator import HydrationCoordinator
from hydration_tracker.services.intake import IntakeRepository, IntakeStore
from hydration_tracker.services.preferences import (
    PreferencesRepository,
    PreferencesStore,
)
from hydration_tracker.services.tips import TipsService


@pytest.fixture(autouse=True)
def reset_package_logger():  # type: ignore[no-untyped-def]
    yield
    logger = logging.getLogger("hydration_tracker")
    logger.handlers.clear()
    logger.propagate = True


BASE_TIME = datetime(2026, 10, 17, 8, 0, tzinfo=UTC)


def at_minute(minute: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minute)


@dataclass
class InMemoryIntakeRepository(IntakeRepository):
    """In-memory intake repository for tests."""

    records: dict[int, IntakeRecord] = field(default_factory=dict)
    next_id: int = 1
    fail_on: set[str] = field(default_factory=set)
    list_calls: int = 0

    def list_records(self) -> list[IntakeRecord]:
        self._maybe_fail("list")
        self.list_calls += 1
        return sorted(
            self.records.values(),
            key=lambda record: (record.timestamp, record.id),
            reverse=True,
        )

    def insert_record(self, amount: float, timestamp: datetime) -> int:
        self._maybe_fail("insert")
        record_id = self.next_id
        self.next_id += 1
        self.records[record_id] = IntakeRecord(
            id=record_id, amount=amount, timestamp=timestamp
        )
        return record_id

    def get_record(self, record_id: int) -> IntakeRecord | None:
        return self.records.get(record_id)

    def update_amount(self, record_id: int, amount: float) -> None:
        self._maybe_fail("update")
        record = self.records[record_id]
        self.records[record_id] = IntakeRecord(
            id=record.id, amount=amount, timestamp=record.timestamp
        )

    def delete_record(self, record_id: int) -> None:
        self._maybe_fail("delete")
        self.records.pop(record_id, None)

    def _maybe_fail(self, action: str) -> None:
        if action in self.fail_on:
            raise OSError(f"disk failure during {action}")


@dataclass
class InMemoryPreferencesRepository(PreferencesRepository):
    """In-memory key-value repository for tests."""

    values: dict[str, object] = field(default_factory=dict)
    writes: list[tuple[str, object]] = field(default_factory=list)
    fail_writes: bool = False

    def get_value(self, key: str) -> object | None:
        return self.values.get(key)

    def set_value(self, key: str, value: object) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.values[key] = value
        self.writes.append((key, value))


@dataclass
class FakeTipsClient(TipsClient):
    """Fake tips client returning a fixed document or raising."""

    payload: object = field(
        default_factory=lambda: {
            "tips": [
                {
                    "id": 1,
                    "title": "Start your day with water",
                    "description": "Drink a glass right after waking up.",
                    "imageUrl": "https://example.com/morning.png",
                }
            ]
        }
    )
    error: Exception | None = None
    calls: int = 0

    async def fetch_tips_document(self) -> object:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        tips_url="https://tips.test/data/hydration_tips.json",
        state_grace_seconds=0.05,
    )


@pytest.fixture
def intake_repository() -> InMemoryIntakeRepository:
    return InMemoryIntakeRepository()


@pytest.fixture
def preferences_repository() -> InMemoryPreferencesRepository:
    return InMemoryPreferencesRepository()


@pytest.fixture
def tips_client() -> FakeTipsClient:
    return FakeTipsClient()


@pytest.fixture
def intake_store(intake_repository: InMemoryIntakeRepository) -> IntakeStore:
    return IntakeStore(intake_repository)


@pytest.fixture
def preferences_store(
    preferences_repository: InMemoryPreferencesRepository,
) -> PreferencesStore:
    return PreferencesStore(preferences_repository)


@pytest.fixture
def tips_service(tips_client: FakeTipsClient) -> TipsService:
    return TipsService(tips_client)


@pytest.fixture
def container(
    settings: Settings,
    intake_store: IntakeStore,
    preferences_store: PreferencesStore,
    tips_service: TipsService,
) -> AppContainer:
    coordinator = HydrationCoordinator(
        intake_store=intake_store,
        preferences_store=preferences_store,
        tips_service=tips_service,
        grace_seconds=settings.state_grace_seconds,
    )

    async def close_resources() -> None:
        await coordinator.close()

    return AppContainer(
        settings=settings,
        intake_store=intake_store,
        preferences_store=preferences_store,
        tips_service=tips_service,
        coordinator=coordinator,
        close_resources=close_resources,
    )
