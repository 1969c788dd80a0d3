"""Domain models for user preferences."""

from dataclasses import dataclass
from enum import Enum

from hydration_tracker.domain.errors import ValidationError

DEFAULT_DAILY_GOAL_ML = 2000


class PreferenceKey(str, Enum):
    """Storage keys for persisted preferences."""

    DAILY_GOAL = "daily_water_goal"
    DARK_MODE = "dark_mode_enabled"
    NOTIFICATIONS = "notifications_enabled"
    REMINDER_ALERTS = "reminder_alerts_enabled"


PREFERENCE_DEFAULTS: dict[PreferenceKey, int | bool] = {
    PreferenceKey.DAILY_GOAL: DEFAULT_DAILY_GOAL_ML,
    PreferenceKey.DARK_MODE: False,
    PreferenceKey.NOTIFICATIONS: True,
    PreferenceKey.REMINDER_ALERTS: True,
}


@dataclass(frozen=True)
class Preferences:
    """Snapshot of all user preferences."""

    daily_goal_ml: int = DEFAULT_DAILY_GOAL_ML
    dark_mode_enabled: bool = False
    notifications_enabled: bool = True
    reminder_alerts_enabled: bool = True


def validate_daily_goal(goal: int) -> None:
    """Reject anything but a positive integer goal."""
    if isinstance(goal, bool) or not isinstance(goal, int):
        raise ValidationError(f"Daily goal must be an integer, got {goal!r}")
    if goal <= 0:
        raise ValidationError(f"Daily goal must be positive, got {goal}")


def validate_toggle(enabled: bool) -> None:
    """Reject anything but a boolean toggle value."""
    if not isinstance(enabled, bool):
        raise ValidationError(f"Expected a boolean, got {enabled!r}")
