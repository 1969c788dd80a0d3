"""Preferences store with defaults for missing keys."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Protocol

from hydration_tracker.domain.errors import (
    HydrationError,
    StorageError,
)
from hydration_tracker.domain.preferences import (
    PREFERENCE_DEFAULTS,
    PreferenceKey,
    Preferences,
    validate_daily_goal,
    validate_toggle,
)
from hydration_tracker.services.observable import ObservableValue

_logger = logging.getLogger(__name__)


class PreferencesRepository(Protocol):
    """Persistence interface for scalar preferences."""

    def get_value(self, key: str) -> object | None:
        """Return the stored value for a key, or None if absent."""

    def set_value(self, key: str, value: object) -> None:
        """Persist a value under a key."""


@dataclass
class PreferencesStore:
    """Durable user preferences, each observable on its own."""

    repository: PreferencesRepository
    _cells: dict[PreferenceKey, ObservableValue[int | bool]] = field(init=False)
    _loaded: set[PreferenceKey] = field(default_factory=set, init=False)
    _lock: asyncio.Lock = field(init=False)

    def __post_init__(self) -> None:
        self._cells = {
            key: ObservableValue(default) for key, default in PREFERENCE_DEFAULTS.items()
        }
        self._lock = asyncio.Lock()

    def observe_daily_goal(self) -> AsyncIterator[int]:
        """Stream the daily goal in milliliters."""
        return self._observe(PreferenceKey.DAILY_GOAL)  # type: ignore[return-value]

    def observe_dark_mode(self) -> AsyncIterator[bool]:
        return self._observe(PreferenceKey.DARK_MODE)  # type: ignore[return-value]

    def observe_notifications(self) -> AsyncIterator[bool]:
        return self._observe(PreferenceKey.NOTIFICATIONS)  # type: ignore[return-value]

    def observe_reminder_alerts(self) -> AsyncIterator[bool]:
        return self._observe(PreferenceKey.REMINDER_ALERTS)  # type: ignore[return-value]

    async def set_daily_goal(self, goal: int) -> None:
        """Persist a new daily goal; it must be a positive integer."""
        validate_daily_goal(goal)
        await self._set(PreferenceKey.DAILY_GOAL, goal)

    async def set_dark_mode(self, enabled: bool) -> None:
        validate_toggle(enabled)
        await self._set(PreferenceKey.DARK_MODE, enabled)

    async def set_notifications(self, enabled: bool) -> None:
        validate_toggle(enabled)
        await self._set(PreferenceKey.NOTIFICATIONS, enabled)

    async def set_reminder_alerts(self, enabled: bool) -> None:
        validate_toggle(enabled)
        await self._set(PreferenceKey.REMINDER_ALERTS, enabled)

    async def current(self) -> Preferences:
        """Return all preferences as one snapshot."""
        async with self._lock:
            for key in PreferenceKey:
                if key not in self._loaded:
                    await self._load(key)
        return Preferences(
            daily_goal_ml=int(self._cells[PreferenceKey.DAILY_GOAL].value),
            dark_mode_enabled=bool(self._cells[PreferenceKey.DARK_MODE].value),
            notifications_enabled=bool(self._cells[PreferenceKey.NOTIFICATIONS].value),
            reminder_alerts_enabled=bool(
                self._cells[PreferenceKey.REMINDER_ALERTS].value
            ),
        )

    def close(self) -> None:
        """End all open preference subscriptions."""
        for cell in self._cells.values():
            cell.close()

    async def _observe(self, key: PreferenceKey) -> AsyncIterator[int | bool]:
        async with self._lock:
            if key not in self._loaded:
                await self._load(key)
        async with aclosing(self._cells[key].subscribe()) as values:
            async for value in values:
                yield value

    async def _set(self, key: PreferenceKey, value: int | bool) -> None:
        async with self._lock:
            try:
                await asyncio.to_thread(self.repository.set_value, key.value, value)
            except HydrationError:
                raise
            except Exception as exc:
                _logger.warning("Preference write failed for %s: %s", key.value, exc)
                raise StorageError(f"Preference write failed: {exc}") from exc
            self._loaded.add(key)
            self._cells[key].publish(value)
        _logger.info("Preference %s set to %s", key.value, value)

    async def _load(self, key: PreferenceKey) -> None:
        try:
            raw = await asyncio.to_thread(self.repository.get_value, key.value)
        except HydrationError:
            raise
        except Exception as exc:
            _logger.warning("Preference read failed for %s: %s", key.value, exc)
            raise StorageError(f"Preference read failed: {exc}") from exc
        self._cells[key].publish(_coerce(key, raw))
        self._loaded.add(key)


def _coerce(key: PreferenceKey, raw: object | None) -> int | bool:
    default = PREFERENCE_DEFAULTS[key]
    if raw is None:
        return default
    if key is PreferenceKey.DAILY_GOAL:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
    elif isinstance(raw, bool):
        return raw
    _logger.warning("Ignoring stored %s value %r; using default", key.value, raw)
    return default

