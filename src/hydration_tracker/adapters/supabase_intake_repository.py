"""Supabase repository for water intake records."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from hydration_tracker.domain.intake import IntakeRecord
from hydration_tracker.services.intake import IntakeRepository

TABLE = "water_intake_records"


@dataclass
class SupabaseIntakeRepository(IntakeRepository):
    """Supabase implementation for intake records."""

    client: Client

    def list_records(self) -> list[IntakeRecord]:
        """Return all records ordered by date, newest first."""
        response = (
            self.client.table(TABLE)
            .select("id, amount, date")
            .order("date", desc=True)
            .order("id", desc=True)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def insert_record(self, amount: float, timestamp: datetime) -> int:
        """Insert a record and return its generated id."""
        response = (
            self.client.table(TABLE)
            .insert({"amount": amount, "date": to_epoch_millis(timestamp)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create intake record")
        return int(response.data[0]["id"])

    def get_record(self, record_id: int) -> IntakeRecord | None:
        """Return a record by id."""
        response = (
            self.client.table(TABLE)
            .select("id, amount, date")
            .eq("id", record_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def update_amount(self, record_id: int, amount: float) -> None:
        """Update the amount of a record."""
        self.client.table(TABLE).update({"amount": amount}).eq(
            "id", record_id
        ).execute()

    def delete_record(self, record_id: int) -> None:
        """Delete a record."""
        self.client.table(TABLE).delete().eq("id", record_id).execute()


def to_epoch_millis(value: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp() * 1000)


def from_epoch_millis(value: int) -> datetime:
    """Convert integer epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=UTC)


def _parse_record(row: dict[str, object]) -> IntakeRecord:
    return IntakeRecord(
        id=int(row["id"]),
        amount=float(row.get("amount", 0.0)),
        timestamp=from_epoch_millis(int(row["date"])),
    )
