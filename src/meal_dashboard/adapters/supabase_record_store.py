"""Supabase repository for daily device meal records."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from meal_dashboard.domain.meals import MealPeriod
from meal_dashboard.domain.records import DailyRecord
from meal_dashboard.services.dashboard import RecordStore

DEFAULT_TABLE = "unodari_token"


@dataclass
class SupabaseRecordStore(RecordStore):
    """Supabase implementation for per-device daily records."""

    client: Client
    table: str = DEFAULT_TABLE

    def fetch(self, device: str, date: str) -> DailyRecord | None:
        """Return the single row for a device and date."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("sensor_id", device)
            .eq("date", date)
            .execute()
        )
        rows = response.data or []
        if len(rows) != 1:
            return None
        return _parse_row(rows[0])

    def update_manual(
        self, device: str, date: str, period: MealPeriod, value: int
    ) -> None:
        """Update the manual override column for one meal period."""
        self.client.table(self.table).update({f"{period}_manual": value}).eq(
            "sensor_id", device
        ).eq("date", date).execute()


def _parse_row(row: dict[str, object]) -> DailyRecord:
    return DailyRecord(
        sensor_id=str(row.get("sensor_id", "")),
        date=str(row.get("date", "")),
        counts={period: _as_int(row.get(str(period))) or 0 for period in MealPeriod},
        manual={period: _as_int(row.get(f"{period}_manual")) for period in MealPeriod},
        totals={
            period: _as_int(row.get(f"{period}_total")) or 0 for period in MealPeriod
        },
        timestamp=_parse_timestamp(row.get("timestamp")),
    )


def _as_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
