"""Tests for the system clock."""

from datetime import datetime

from meal_dashboard.services.clock import SystemClock, today


def test_system_clock_defaults_to_host_local_zone() -> None:
    now = SystemClock().now()

    assert now.tzinfo is not None
    assert now.utcoffset() == datetime.now().astimezone().utcoffset()


def test_system_clock_uses_configured_zone() -> None:
    clock = SystemClock("Asia/Kolkata")

    assert clock.now().utcoffset().total_seconds() == 5.5 * 3600
    assert today(clock) == clock.now().date().isoformat()
