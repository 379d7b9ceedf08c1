import datetime
import enum
import logging
from typing import List, Mapping, Tuple

from pydantic import BaseModel

from .aggregator import Aggregator
from .streak_calculator import StreakCalculator

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
WEEKDAY_LABELS = ("S", "M", "T", "W", "T", "F", "S")
LEGEND_MINUTES = (0, 30, 60, 90, 120)
SATURDAY = 5


class IntensityLevel(enum.Enum):
    NONE = (0, 0.0)
    LOW = (1, 0.3)
    MEDIUM = (2, 0.5)
    HIGH = (3, 0.7)
    MAX = (4, 1.0)

    def __init__(self, rank: int, opacity: float) -> None:
        self.rank = rank
        self.opacity = opacity


class HeatmapCell(BaseModel):
    day: datetime.date
    minutes: int
    level: IntensityLevel


class HeatmapGrid(BaseModel):
    weeks: List[List[HeatmapCell]]
    month_labels: List[Tuple[int, str]]
    active_days: int
    longest_streak: int
    total_minutes: int

    def to_dict(self) -> dict:
        return {
            "weeks": [
                [
                    {
                        "date": c.day.isoformat(),
                        "minutes": c.minutes,
                        "level": c.level.rank,
                    }
                    for c in week
                ]
                for week in self.weeks
            ],
            "month_labels": [
                {"week": idx, "label": label} for idx, label in self.month_labels
            ],
            "active_days": self.active_days,
            "longest_streak": self.longest_streak,
            "total_minutes": self.total_minutes,
            "total_hours": self.total_minutes // 60,
        }


class HeatmapBuilder:
    """Build a Sunday-first calendar grid of daily workout minutes."""

    DEFAULT_WEEKS: int = 26

    @staticmethod
    def intensity_for_minutes(minutes: int) -> IntensityLevel:
        if minutes <= 0:
            return IntensityLevel.NONE
        if minutes < 30:
            return IntensityLevel.LOW
        if minutes < 60:
            return IntensityLevel.MEDIUM
        if minutes < 90:
            return IntensityLevel.HIGH
        return IntensityLevel.MAX

    @staticmethod
    def date_range(
        today: datetime.date, weeks_to_show: int = DEFAULT_WEEKS
    ) -> List[datetime.date]:
        """Return every day from the first shown week's Sunday through ``today``."""
        if weeks_to_show < 1:
            raise ValueError("weeks_to_show must be positive")
        try:
            weeks_ago = today - datetime.timedelta(weeks=weeks_to_show - 1)
            start = Aggregator.start_of_week(weeks_ago)
        except OverflowError:
            logger.warning("heatmap start for %d weeks before %s out of range", weeks_to_show, today)
            return []
        days: List[datetime.date] = []
        current = start
        while current <= today:
            days.append(current)
            if current == today:
                break
            current += datetime.timedelta(days=1)
        return days

    @staticmethod
    def weeks(days: List[datetime.date]) -> List[List[datetime.date]]:
        """Chunk ``days`` into buckets that close after each Saturday."""
        buckets: List[List[datetime.date]] = []
        current: List[datetime.date] = []
        for day in days:
            current.append(day)
            if day.weekday() == SATURDAY:
                buckets.append(current)
                current = []
        if current:
            buckets.append(current)
        return buckets

    @staticmethod
    def month_labels(weeks: List[List[datetime.date]]) -> List[Tuple[int, str]]:
        """Return ``(week_index, month)`` where a week's first day starts a new month."""
        labels: List[Tuple[int, str]] = []
        last_month = None
        for idx, week in enumerate(weeks):
            if not week:
                continue
            month = week[0].month
            if month != last_month:
                labels.append((idx, MONTH_NAMES[month - 1]))
                last_month = month
        return labels

    @classmethod
    def build(
        cls,
        daily_totals: Mapping[datetime.date, int],
        today: datetime.date,
        weeks_to_show: int = DEFAULT_WEEKS,
    ) -> HeatmapGrid:
        days = cls.date_range(today, weeks_to_show)
        buckets = cls.weeks(days)
        grid = [
            [
                HeatmapCell(
                    day=day,
                    minutes=daily_totals.get(day, 0),
                    level=cls.intensity_for_minutes(daily_totals.get(day, 0)),
                )
                for day in week
            ]
            for week in buckets
        ]
        return HeatmapGrid(
            weeks=grid,
            month_labels=cls.month_labels(buckets),
            active_days=sum(1 for m in daily_totals.values() if m > 0),
            longest_streak=StreakCalculator.longest_streak(days, daily_totals),
            total_minutes=sum(daily_totals.values()),
        )
