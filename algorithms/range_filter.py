import datetime
import enum
import logging
from typing import Iterable, List

from models import WorkoutEntry

logger = logging.getLogger(__name__)


class TimeRange(enum.Enum):
    """Trailing windows offered by the charts view."""

    WEEK = ("week", "Week", 7)
    MONTH = ("month", "Month", 30)
    THREE_MONTHS = ("three_months", "3 Months", 90)
    YEAR = ("year", "Year", 365)

    def __init__(self, key: str, label: str, days: int) -> None:
        self.key = key
        self.label = label
        self.days = days

    @classmethod
    def from_key(cls, key: str) -> "TimeRange":
        for item in cls:
            if item.key == key:
                return item
        raise ValueError(f"unknown time range: {key}")


class RangeFilter:
    """Select entries inside a trailing window ending at a reference instant."""

    @staticmethod
    def cutoff(now: datetime.datetime, days: int) -> datetime.datetime:
        """Return ``now - days``, or ``datetime.min`` when that underflows."""
        try:
            return now - datetime.timedelta(days=days)
        except OverflowError:
            logger.warning("cutoff for %d days before %s out of range", days, now)
            return datetime.datetime.min

    @staticmethod
    def within(
        entries: Iterable[WorkoutEntry], now: datetime.datetime, days: int
    ) -> List[WorkoutEntry]:
        """Return entries dated on or after ``now - days``.

        Entries later than ``now`` are kept. A zero-day window selects the
        entries that fall on ``now``'s calendar day.
        """
        if days < 0:
            raise ValueError("days must be non-negative")
        if days == 0:
            today = now.date()
            return [e for e in entries if e.date.date() == today]
        cutoff = RangeFilter.cutoff(now, days)
        return [e for e in entries if e.date >= cutoff]

    @staticmethod
    def for_range(
        entries: Iterable[WorkoutEntry], now: datetime.datetime, time_range: TimeRange
    ) -> List[WorkoutEntry]:
        return RangeFilter.within(entries, now, time_range.days)
