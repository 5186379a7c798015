"""Dashboard refresh loop and manual override submission."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Protocol
from zoneinfo import ZoneInfo

from meal_dashboard.domain.meals import (
    DEFAULT_MEAL_WINDOWS,
    MealPeriod,
    MealWindow,
    card_order,
    current_period,
)
from meal_dashboard.domain.records import AggregateView, DailyRecord, FieldMapping
from meal_dashboard.services.aggregation import aggregate
from meal_dashboard.services.clock import Clock, today
from meal_dashboard.services.view import (
    GRAND_TOTAL_KEY,
    ButtonBinding,
    InputBinding,
    View,
    device_count_key,
    manual_input_key,
    meal_total_key,
    submit_button_key,
    timestamp_key,
    total_key,
)

logger = logging.getLogger(__name__)

EMPTY_VALUE_MESSAGE = "Please enter a value."
INVALID_NUMBER_MESSAGE = "Please enter a valid number."
UNKNOWN_TARGET_MESSAGE = "Unknown device or meal."
BUSY_MESSAGE = "Update already in progress."
FAILED_MESSAGE = "Failed to update data."
SUCCESS_MESSAGE = "Added successfully!"


class RecordStore(Protocol):
    """Backend access for daily device records."""

    def fetch(self, device: str, date: str) -> DailyRecord | None:
        """Return the record for a device and date, if exactly one exists."""

    def update_manual(
        self, device: str, date: str, period: MealPeriod, value: int
    ) -> None:
        """Set the manual override for one period; raise on failure."""


class SubmitStatus(StrEnum):
    """Outcome of a manual override submission."""

    OK = "ok"
    INVALID = "invalid"
    BUSY = "busy"
    FAILED = "failed"


@dataclass(frozen=True)
class ManualSubmitResult:
    """User-facing result of a manual override submission."""

    status: SubmitStatus
    message: str

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.OK


@dataclass
class DashboardService:
    """Fetches, aggregates and renders per-device meal counts."""

    store: RecordStore
    view: View
    clock: Clock
    devices: list[str]
    windows: tuple[MealWindow, ...] = DEFAULT_MEAL_WINDOWS
    hour_offset: int = 0
    mapping: FieldMapping = FieldMapping.TOTAL
    latest: AggregateView | None = None
    _in_flight: set[tuple[str, MealPeriod]] = field(default_factory=set)

    def active_period(self) -> MealPeriod | None:
        """Return the meal period active at the current local hour."""
        return current_period(
            self.clock.now().hour, self.windows, offset_hours=self.hour_offset
        )

    async def refresh(self) -> AggregateView:
        """Fetch today's records, update all bindings and re-highlight."""
        self.apply_highlight()
        day = today(self.clock)
        records: list[DailyRecord] = []
        for device in self.devices:
            record = await self._fetch(device, day)
            if record is not None:
                records.append(record)

        view = aggregate(day, self.devices, records, self.mapping)
        self._fill_manual_inputs(records)
        self._render(view)
        self.latest = view
        self.apply_highlight()
        return view

    def apply_highlight(self) -> MealPeriod | None:
        """Reorder cards and highlight the active meal period."""
        active = self.active_period()
        self.view.reorder_cards(card_order(active))
        self.view.highlight(active)
        return active

    async def submit_manual(
        self, period: MealPeriod | str, device: str, value: int | str | None
    ) -> ManualSubmitResult:
        """Validate and store a manual override, then refresh."""
        raw = "" if value is None else str(value).strip()
        if not raw:
            return ManualSubmitResult(SubmitStatus.INVALID, EMPTY_VALUE_MESSAGE)
        digits = raw[1:] if raw[0] in "+-" else raw
        if not digits.isdecimal():
            return ManualSubmitResult(SubmitStatus.INVALID, INVALID_NUMBER_MESSAGE)
        count = int(raw)
        try:
            meal = MealPeriod(period)
        except ValueError:
            return ManualSubmitResult(SubmitStatus.INVALID, UNKNOWN_TARGET_MESSAGE)
        if device not in self.devices:
            return ManualSubmitResult(SubmitStatus.INVALID, UNKNOWN_TARGET_MESSAGE)

        key = (device, meal)
        if key in self._in_flight:
            return ManualSubmitResult(SubmitStatus.BUSY, BUSY_MESSAGE)

        input_sink = self.view.bind(manual_input_key(device, meal))
        button = self.view.bind(submit_button_key(device, meal))
        self._in_flight.add(key)
        if isinstance(button, ButtonBinding):
            button.disable()
        try:
            await asyncio.to_thread(
                self.store.update_manual, device, today(self.clock), meal, count
            )
        except Exception:
            logger.exception(
                "Error updating manual data",
                extra={"device": device, "period": str(meal)},
            )
            return ManualSubmitResult(SubmitStatus.FAILED, FAILED_MESSAGE)
        finally:
            self._in_flight.discard(key)
            if isinstance(button, ButtonBinding):
                button.enable()

        if isinstance(input_sink, InputBinding):
            input_sink.clear()
        await self.refresh()
        return ManualSubmitResult(SubmitStatus.OK, SUCCESS_MESSAGE)

    async def _fetch(self, device: str, day: str) -> DailyRecord | None:
        try:
            record = await asyncio.to_thread(self.store.fetch, device, day)
        except Exception:
            logger.warning(
                "Failed to fetch device record",
                exc_info=True,
                extra={"device": device, "date": day},
            )
            return None
        if record is None:
            logger.debug("No record for device", extra={"device": device, "date": day})
        return record

    def _fill_manual_inputs(self, records: list[DailyRecord]) -> None:
        for record in records:
            for period in MealPeriod:
                manual = record.manual.get(period)
                self._write(
                    manual_input_key(record.sensor_id, period),
                    "" if manual is None else str(manual),
                )

    def _render(self, view: AggregateView) -> None:
        for period, period_aggregate in view.periods.items():
            for device in self.devices:
                self._write(
                    device_count_key(device, period),
                    str(period_aggregate.devices.get(device, 0)),
                )
            self._write(meal_total_key(period), str(period_aggregate.total))
            self._write(
                timestamp_key(period),
                "Last Updated: "
                + (
                    self._format_timestamp(period_aggregate.timestamp)
                    if period_aggregate.timestamp
                    else "-"
                ),
            )
            self._write(total_key(period), str(period_aggregate.total))
        self._write(GRAND_TOTAL_KEY, str(view.grand_total))

    def _format_timestamp(self, value: datetime) -> str:
        tz = self.clock.now().tzinfo or ZoneInfo("UTC")
        return value.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S")

    def _write(self, key: str, text: str) -> None:
        sink = self.view.bind(key)
        if sink is not None:
            sink.write(text)
