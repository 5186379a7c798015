"""Wall clock access for record keying and period classification."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current local time."""

    def now(self) -> datetime:
        """Return the current timezone-aware time."""


@dataclass
class SystemClock(Clock):
    """System clock in the host's local zone or a configured IANA timezone."""

    timezone_name: str | None = None

    def now(self) -> datetime:
        """Return the current timezone-aware local time."""
        if self.timezone_name is None:
            return datetime.now().astimezone()
        return datetime.now(tz=ZoneInfo(self.timezone_name))


def today(clock: Clock) -> str:
    """Return the local calendar date as ``YYYY-MM-DD``."""
    return clock.now().date().isoformat()
