"""Meal periods and the active-period classifier."""

from dataclasses import dataclass
from enum import StrEnum

HOURS_PER_DAY = 24


class MealPeriod(StrEnum):
    """Meal periods in classification priority order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


@dataclass(frozen=True)
class MealWindow:
    """Half-open hour window [start, end) for a meal period."""

    period: MealPeriod
    start: int
    end: int

    def contains(self, hour: int) -> bool:
        """Return True if the hour falls inside the window."""
        return self.start <= hour < self.end


DEFAULT_MEAL_WINDOWS: tuple[MealWindow, ...] = (
    MealWindow(MealPeriod.BREAKFAST, 6, 9),
    MealWindow(MealPeriod.LUNCH, 11, 15),
    MealWindow(MealPeriod.DINNER, 17, 22),
)


def current_period(
    hour: int,
    windows: tuple[MealWindow, ...] = DEFAULT_MEAL_WINDOWS,
    offset_hours: int = 0,
) -> MealPeriod | None:
    """Return the meal period active at the given local hour, if any."""
    if not 0 <= hour < HOURS_PER_DAY:
        raise ValueError(f"Hour out of range: {hour}")
    shifted = (hour + offset_hours) % HOURS_PER_DAY
    by_period = {window.period: window for window in windows}
    for period in MealPeriod:
        window = by_period.get(period)
        if window and window.contains(shifted):
            return period
    return None


def card_order(active: MealPeriod | None) -> list[MealPeriod]:
    """Return display order with the active period first."""
    periods = list(MealPeriod)
    if active is None:
        return periods
    return [active, *(period for period in periods if period != active)]


def parse_meal_windows(raw: str) -> tuple[MealWindow, ...]:
    """Parse windows from ``breakfast=6-9,lunch=11-15,dinner=17-22``."""
    parsed: dict[MealPeriod, MealWindow] = {}
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        name, sep, span = value.partition("=")
        start_raw, dash, end_raw = span.partition("-")
        if not sep or not dash:
            raise ValueError(f"Invalid meal window: {value!r}")
        try:
            period = MealPeriod(name.strip().lower())
            start, end = int(start_raw), int(end_raw)
        except ValueError as exc:
            raise ValueError(f"Invalid meal window: {value!r}") from exc
        if period in parsed:
            raise ValueError(f"Duplicate meal window: {period}")
        if not 0 <= start < end <= HOURS_PER_DAY:
            raise ValueError(f"Invalid hour range for {period}: {start}-{end}")
        parsed[period] = MealWindow(period, start, end)

    missing = [period for period in MealPeriod if period not in parsed]
    if missing:
        raise ValueError(f"Missing meal windows: {', '.join(missing)}")

    windows = tuple(parsed[period] for period in MealPeriod)
    ordered = sorted(windows, key=lambda window: window.start)
    for left, right in zip(ordered, ordered[1:], strict=False):
        if right.start < left.end:
            raise ValueError(f"Meal windows overlap: {left.period} and {right.period}")
    return windows
