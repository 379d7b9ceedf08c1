import datetime
import logging
from typing import Iterable, Mapping

from models import WorkoutEntry

logger = logging.getLogger(__name__)


class StreakCalculator:
    """Consecutive-day workout streaks."""

    MAX_CURRENT_STREAK_DAYS: int = 30

    @classmethod
    def current_streak(
        cls,
        entries: Iterable[WorkoutEntry],
        today: datetime.date,
        max_days: int | None = None,
    ) -> int:
        """Return the run of days with an entry ending on ``today``.

        Only the presence of an entry is checked, not its minutes. The walk
        stops at the first empty day or after ``max_days`` days.
        """
        limit = cls.MAX_CURRENT_STREAK_DAYS if max_days is None else max_days
        days = {e.date.date() for e in entries}
        count = 0
        current = today
        for _ in range(limit):
            if current not in days:
                break
            count += 1
            try:
                current -= datetime.timedelta(days=1)
            except OverflowError:
                logger.warning("streak walk reached the earliest representable day")
                break
        return count

    @staticmethod
    def longest_streak(
        days: Iterable[datetime.date], daily_totals: Mapping[datetime.date, int]
    ) -> int:
        """Return the longest run of ``days`` whose total minutes are positive."""
        longest = 0
        running = 0
        for day in sorted(days):
            if daily_totals.get(day, 0) > 0:
                running += 1
                longest = max(longest, running)
            else:
                running = 0
        return longest
