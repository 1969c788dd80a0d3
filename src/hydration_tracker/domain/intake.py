"""Domain models for water intake logging."""

from dataclasses import dataclass
from datetime import datetime

from hydration_tracker.domain.errors import ValidationError


@dataclass(frozen=True)
class IntakeRecord:
    """A single logged water intake event."""

    id: int
    amount: float
    timestamp: datetime


@dataclass(frozen=True)
class DailySummary:
    """Running intake total measured against the daily goal."""

    total_ml: float
    goal_ml: int

    @property
    def progress(self) -> float:
        """Fraction of the goal reached, clamped to [0, 1]."""
        if self.goal_ml <= 0:
            return 0.0
        return min(max(self.total_ml / self.goal_ml, 0.0), 1.0)

    @property
    def remaining_ml(self) -> float:
        return max(self.goal_ml - self.total_ml, 0.0)

    @property
    def goal_reached(self) -> bool:
        return self.goal_ml > 0 and self.total_ml >= self.goal_ml


def summarize(records: tuple[IntakeRecord, ...], goal_ml: int) -> DailySummary:
    """Sum record amounts into a summary for the given goal."""
    total = sum(record.amount for record in records)
    return DailySummary(total_ml=float(total), goal_ml=goal_ml)


def validate_amount(amount: float) -> None:
    """Reject anything but a positive number of milliliters."""
    if isinstance(amount, bool) or not isinstance(amount, int | float):
        raise ValidationError(f"Intake amount must be a number, got {amount!r}")
    if not amount > 0:
        raise ValidationError(f"Intake amount must be positive, got {amount}")
