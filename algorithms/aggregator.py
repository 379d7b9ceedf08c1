import datetime
import logging
from typing import Dict, Iterable, List, Tuple

from models import WorkoutEntry

logger = logging.getLogger(__name__)


class Aggregator:
    """Reductions over a list of workout entries."""

    @staticmethod
    def start_of_day(ts: datetime.datetime | datetime.date) -> datetime.date:
        """Return the calendar day of ``ts``."""
        if isinstance(ts, datetime.datetime):
            return ts.date()
        return ts

    @staticmethod
    def start_of_week(day: datetime.date) -> datetime.date:
        """Return the Sunday on or before ``day``."""
        return day - datetime.timedelta(days=(day.weekday() + 1) % 7)

    @staticmethod
    def total_minutes(entries: Iterable[WorkoutEntry]) -> int:
        return sum(e.duration_minutes for e in entries)

    @staticmethod
    def average_weight(entries: Iterable[WorkoutEntry]) -> float:
        weights = [e.body_weight_kg for e in entries]
        if not weights:
            return 0.0
        return sum(weights) / len(weights)

    @staticmethod
    def count(entries: Iterable[WorkoutEntry]) -> int:
        return sum(1 for _ in entries)

    @staticmethod
    def average_duration(entries: Iterable[WorkoutEntry]) -> int:
        """Return the integer mean duration, ``0`` for an empty list."""
        items = list(entries)
        if not items:
            return 0
        return Aggregator.total_minutes(items) // len(items)

    @staticmethod
    def daily_totals(entries: Iterable[WorkoutEntry]) -> Dict[datetime.date, int]:
        """Return summed minutes keyed by calendar day."""
        totals: Dict[datetime.date, int] = {}
        for entry in entries:
            day = Aggregator.start_of_day(entry.date)
            totals[day] = totals.get(day, 0) + entry.duration_minutes
        return totals

    @staticmethod
    def weekly_totals(
        entries: Iterable[WorkoutEntry],
    ) -> List[Tuple[datetime.date, int]]:
        """Return ``(week_start, minutes)`` pairs sorted by week start."""
        by_week: Dict[datetime.date, int] = {}
        for entry in entries:
            try:
                week = Aggregator.start_of_week(Aggregator.start_of_day(entry.date))
            except OverflowError:
                logger.warning("skipping entry %s: week start out of range", entry.id)
                continue
            by_week[week] = by_week.get(week, 0) + entry.duration_minutes
        return sorted(by_week.items())
