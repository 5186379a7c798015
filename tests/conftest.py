"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from meal_dashboard.config import Settings
from meal_dashboard.containers import AppContainer
from meal_dashboard.domain.meals import MealPeriod
from meal_dashboard.domain.records import DailyRecord
from meal_dashboard.services.clock import Clock
from meal_dashboard.services.dashboard import DashboardService, RecordStore
from meal_dashboard.services.scheduler import RefreshScheduler
from meal_dashboard.services.view import DashboardView, default_binding_keys

DEVICES = ["uno_1", "uno_2", "uno_3"]
TODAY = "2024-06-05"


@dataclass
class FixedClock(Clock):
    """Clock frozen at a settable time."""

    current: datetime = field(
        default_factory=lambda: datetime(
            2024, 6, 5, 12, 30, tzinfo=ZoneInfo("Asia/Kolkata")
        )
    )

    def now(self) -> datetime:
        return self.current

    def set_hour(self, hour: int) -> None:
        self.current = self.current.replace(hour=hour)


def make_record(  # noqa: PLR0913
    sensor_id: str,
    breakfast: int = 0,
    lunch: int = 0,
    dinner: int = 0,
    manual: dict[MealPeriod, int | None] | None = None,
    date: str = TODAY,
    timestamp: datetime | None = None,
) -> DailyRecord:
    counts = {
        MealPeriod.BREAKFAST: breakfast,
        MealPeriod.LUNCH: lunch,
        MealPeriod.DINNER: dinner,
    }
    manual_values = manual or {}
    return DailyRecord(
        sensor_id=sensor_id,
        date=date,
        counts=counts,
        manual=manual_values,
        totals={
            period: count + (manual_values.get(period) or 0)
            for period, count in counts.items()
        },
        timestamp=timestamp,
    )


@dataclass
class InMemoryRecordStore(RecordStore):
    """In-memory record store for tests."""

    records: dict[tuple[str, str], DailyRecord] = field(default_factory=dict)
    failing_devices: set[str] = field(default_factory=set)
    fail_updates: bool = False
    fetches: list[tuple[str, str]] = field(default_factory=list)
    updates: list[tuple[str, str, MealPeriod, int]] = field(default_factory=list)

    def add(self, record: DailyRecord) -> None:
        self.records[(record.sensor_id, record.date)] = record

    def fetch(self, device: str, date: str) -> DailyRecord | None:
        self.fetches.append((device, date))
        if device in self.failing_devices:
            raise RuntimeError("backend unavailable")
        return self.records.get((device, date))

    def update_manual(
        self, device: str, date: str, period: MealPeriod, value: int
    ) -> None:
        if self.fail_updates:
            raise RuntimeError("update rejected")
        self.updates.append((device, date, period, value))
        current = self.records.get((device, date)) or make_record(device, date=date)
        manual = {**current.manual, period: value}
        totals = {
            meal: (current.counts.get(meal) or 0) + (manual.get(meal) or 0)
            for meal in MealPeriod
        }
        self.records[(device, date)] = DailyRecord(
            sensor_id=current.sensor_id,
            date=current.date,
            counts=current.counts,
            manual=manual,
            totals=totals,
            timestamp=current.timestamp,
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="header.payload.signature",
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def view() -> DashboardView:
    return DashboardView.from_keys(default_binding_keys(DEVICES))


@pytest.fixture
def service(
    store: InMemoryRecordStore, view: DashboardView, clock: FixedClock
) -> DashboardService:
    return DashboardService(store=store, view=view, clock=clock, devices=DEVICES)


@pytest.fixture
def container(
    settings: Settings, view: DashboardView, service: DashboardService
) -> AppContainer:
    scheduler = RefreshScheduler(service)

    async def close_resources() -> None:
        await scheduler.stop()

    return AppContainer(
        settings=settings,
        view=view,
        dashboard_service=service,
        scheduler=scheduler,
        close_resources=close_resources,
    )
