"""Coordinator between the stores and the presentation layer."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from hydration_tracker.domain.intake import (
    DailySummary,
    IntakeRecord,
    summarize,
    validate_amount,
)
from hydration_tracker.domain.preferences import (
    PREFERENCE_DEFAULTS,
    PreferenceKey,
    validate_daily_goal,
    validate_toggle,
)
from hydration_tracker.domain.tips import TipsResult
from hydration_tracker.services.intake import IntakeStore
from hydration_tracker.services.observable import SharedState
from hydration_tracker.services.preferences import PreferencesStore
from hydration_tracker.services.tips import TipsService
from hydration_tracker.services.work_queue import WorkQueue

_logger = logging.getLogger(__name__)


class HydrationCoordinator:
    """Caches store state for the UI and turns intents into store mutations.

    Every ``current_*`` property is readable synchronously and falls back to
    the preference defaults (or an empty record list) until the first
    upstream emission. Intent methods validate their input, enqueue the
    mutation and return a future the caller may ignore.
    """

    def __init__(
        self,
        intake_store: IntakeStore,
        preferences_store: PreferencesStore,
        tips_service: TipsService,
        *,
        work_queue: WorkQueue | None = None,
        grace_seconds: float = 5.0,
    ) -> None:
        self.intake_store = intake_store
        self.preferences_store = preferences_store
        self.tips_service = tips_service
        self.work_queue = work_queue or WorkQueue()
        self._records: SharedState[tuple[IntakeRecord, ...]] = SharedState(
            "records", intake_store.observe_all, (), grace_seconds
        )
        self._goal: SharedState[int] = SharedState(
            "daily_goal",
            preferences_store.observe_daily_goal,
            int(PREFERENCE_DEFAULTS[PreferenceKey.DAILY_GOAL]),
            grace_seconds,
        )
        self._dark_mode: SharedState[bool] = SharedState(
            "dark_mode",
            preferences_store.observe_dark_mode,
            bool(PREFERENCE_DEFAULTS[PreferenceKey.DARK_MODE]),
            grace_seconds,
        )
        self._notifications: SharedState[bool] = SharedState(
            "notifications",
            preferences_store.observe_notifications,
            bool(PREFERENCE_DEFAULTS[PreferenceKey.NOTIFICATIONS]),
            grace_seconds,
        )
        self._reminder_alerts: SharedState[bool] = SharedState(
            "reminder_alerts",
            preferences_store.observe_reminder_alerts,
            bool(PREFERENCE_DEFAULTS[PreferenceKey.REMINDER_ALERTS]),
            grace_seconds,
        )
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def current_records(self) -> tuple[IntakeRecord, ...]:
        return self._records.value

    @property
    def current_goal(self) -> int:
        return self._goal.value

    @property
    def current_dark_mode(self) -> bool:
        return self._dark_mode.value

    @property
    def current_notifications(self) -> bool:
        return self._notifications.value

    @property
    def current_reminder_alerts(self) -> bool:
        return self._reminder_alerts.value

    @property
    def tips_state(self) -> TipsResult:
        return self.tips_service.state

    def summary(self) -> DailySummary:
        """Return the running intake total against the current goal."""
        return summarize(self.current_records, self.current_goal)

    def observe_records(self) -> AsyncIterator[tuple[IntakeRecord, ...]]:
        return self._records.observe()

    def observe_goal(self) -> AsyncIterator[int]:
        return self._goal.observe()

    def observe_dark_mode(self) -> AsyncIterator[bool]:
        return self._dark_mode.observe()

    def observe_notifications(self) -> AsyncIterator[bool]:
        return self._notifications.observe()

    def observe_reminder_alerts(self) -> AsyncIterator[bool]:
        return self._reminder_alerts.observe()

    def observe_tips(self) -> AsyncIterator[TipsResult]:
        return self.tips_service.observe_state()

    def add_intake(self, amount: float) -> "asyncio.Future[int]":
        """Log a new intake of ``amount`` milliliters."""
        validate_amount(amount)
        _logger.debug("add_intake: adding %s ml", amount)
        return self._submit("add_intake", lambda: self.intake_store.add(amount))

    def update_intake(self, record_id: int, amount: float) -> "asyncio.Future[Any]":
        """Change the amount of an existing record."""
        validate_amount(amount)
        _logger.debug("update_intake: record id=%s amount=%s", record_id, amount)
        return self._submit(
            "update_intake", lambda: self.intake_store.update(record_id, amount)
        )

    def delete_intake(self, record_id: int) -> "asyncio.Future[None]":
        """Remove a record."""
        _logger.debug("delete_intake: record id=%s", record_id)
        return self._submit(
            "delete_intake", lambda: self.intake_store.delete(record_id)
        )

    def set_daily_goal(self, goal: int) -> "asyncio.Future[None]":
        validate_daily_goal(goal)
        return self._submit(
            "set_daily_goal", lambda: self.preferences_store.set_daily_goal(goal)
        )

    def set_dark_mode(self, enabled: bool) -> "asyncio.Future[None]":
        validate_toggle(enabled)
        return self._submit(
            "set_dark_mode", lambda: self.preferences_store.set_dark_mode(enabled)
        )

    def set_notifications(self, enabled: bool) -> "asyncio.Future[None]":
        validate_toggle(enabled)
        return self._submit(
            "set_notifications",
            lambda: self.preferences_store.set_notifications(enabled),
        )

    def set_reminder_alerts(self, enabled: bool) -> "asyncio.Future[None]":
        validate_toggle(enabled)
        return self._submit(
            "set_reminder_alerts",
            lambda: self.preferences_store.set_reminder_alerts(enabled),
        )

    def fetch_tips(self) -> "asyncio.Task[TipsResult]":
        """Start a new tips fetch cycle in the background."""
        task = asyncio.get_running_loop().create_task(self.tips_service.fetch_tips())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def close(self) -> None:
        """Finish queued intents and stop all upstream subscriptions."""
        await self.work_queue.close()
        for task in list(self._background):
            task.cancel()
        await asyncio.gather(*self._background, return_exceptions=True)
        for state in (
            self._records,
            self._goal,
            self._dark_mode,
            self._notifications,
            self._reminder_alerts,
        ):
            await state.close()

    def _submit(
        self, label: str, operation: Callable[[], Awaitable[Any]]
    ) -> "asyncio.Future[Any]":
        future = self.work_queue.submit(operation, label=label)
        future.add_done_callback(_log_outcome(label))
        return future


def _log_outcome(label: str) -> Callable[["asyncio.Future[Any]"], None]:
    def callback(future: "asyncio.Future[Any]") -> None:
        if future.cancelled():
            _logger.info("%s: cancelled", label)
            return
        exc = future.exception()
        if exc is not None:
            _logger.error("%s failed: %s", label, exc)
            return
        _logger.debug("%s: complete", label)

    return callback

