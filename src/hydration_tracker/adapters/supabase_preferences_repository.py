"""Supabase repository for user preferences."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from hydration_tracker.services.preferences import PreferencesRepository

TABLE = "preferences"


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase key-value implementation for preferences."""

    client: Client

    def get_value(self, key: str) -> object | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(TABLE).select("value").eq("key", key).limit(1).execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set_value(self, key: str, value: object) -> None:
        """Insert or replace the value for a key."""
        self.client.table(TABLE).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
