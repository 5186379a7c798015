"""Aggregation of daily device records into dashboard totals."""

from collections.abc import Iterable

from meal_dashboard.domain.meals import MealPeriod
from meal_dashboard.domain.records import (
    AggregateView,
    DailyRecord,
    FieldMapping,
    PeriodAggregate,
)


def aggregate(
    date: str,
    devices: Iterable[str],
    records: Iterable[DailyRecord],
    mapping: FieldMapping = FieldMapping.TOTAL,
) -> AggregateView:
    """Sum per-device counts per meal period and overall."""
    known = list(devices)
    periods = {
        period: PeriodAggregate(devices={device: 0 for device in known})
        for period in MealPeriod
    }
    grand_total = 0
    for record in records:
        if record.sensor_id not in known:
            continue
        for period, period_aggregate in periods.items():
            count = record.count_for(period, mapping)
            period_aggregate.devices[record.sensor_id] += count
            period_aggregate.total += count
            grand_total += count
            if record.timestamp and (
                period_aggregate.timestamp is None
                or record.timestamp > period_aggregate.timestamp
            ):
                period_aggregate.timestamp = record.timestamp
    return AggregateView(date=date, periods=periods, grand_total=grand_total)
