"""Domain models for daily device records and aggregates."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from meal_dashboard.domain.meals import MealPeriod


class FieldMapping(StrEnum):
    """How a daily record is turned into a per-period count."""

    TOTAL = "total"
    COMBINED = "combined"
    RAW = "raw"


@dataclass(frozen=True)
class DailyRecord:
    """Meal counts reported by one device for one date."""

    sensor_id: str
    date: str
    counts: dict[MealPeriod, int] = field(default_factory=dict)
    manual: dict[MealPeriod, int | None] = field(default_factory=dict)
    totals: dict[MealPeriod, int] = field(default_factory=dict)
    timestamp: datetime | None = None

    def count_for(self, period: MealPeriod, mapping: FieldMapping) -> int:
        """Return the count for a period under the given field mapping."""
        if mapping is FieldMapping.TOTAL:
            return self.totals.get(period) or 0
        auto = self.counts.get(period) or 0
        if mapping is FieldMapping.RAW:
            return auto
        return auto + (self.manual.get(period) or 0)


@dataclass
class PeriodAggregate:
    """Per-device counts and total for one meal period."""

    devices: dict[str, int]
    total: int = 0
    timestamp: datetime | None = None


@dataclass
class AggregateView:
    """Derived dashboard totals, rebuilt on every refresh."""

    date: str
    periods: dict[MealPeriod, PeriodAggregate]
    grand_total: int = 0

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "date": self.date,
            "grand_total": self.grand_total,
            "periods": {
                str(period): {
                    "devices": dict(aggregate.devices),
                    "total": aggregate.total,
                    "timestamp": (
                        aggregate.timestamp.isoformat() if aggregate.timestamp else None
                    ),
                }
                for period, aggregate in self.periods.items()
            },
        }
