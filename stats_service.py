from __future__ import annotations
import datetime
import logging
from typing import List, Optional, Dict

from db import WorkoutEntryRepository, SettingsRepository
from models import WorkoutEntry
from settings_schema import DebugSettings
from algorithms import (
    Aggregator,
    DataPartitioner,
    HeatmapBuilder,
    HeatmapGrid,
    RangeFilter,
    StreakCalculator,
    TimeRange,
)

logger = logging.getLogger(__name__)


class StatisticsService:
    """Compute the home, charts, heatmap and history views from stored entries.

    Every method reads the store and the persisted settings afresh, so callers
    simply call again after a mutation. ``now`` and ``settings`` may be passed
    explicitly to pin the computation.
    """

    RECENT_LIMIT = 3

    def __init__(
        self,
        entry_repo: WorkoutEntryRepository,
        settings_repo: SettingsRepository | None = None,
    ) -> None:
        self.entries = entry_repo
        self.settings = settings_repo

    def _debug_settings(self, settings: DebugSettings | None) -> DebugSettings:
        if settings is not None:
            return settings
        if self.settings is not None:
            return self.settings.debug_settings()
        return DebugSettings()

    @staticmethod
    def _now(now: datetime.datetime | None) -> datetime.datetime:
        return now or datetime.datetime.now()

    def visible_entries(
        self, settings: DebugSettings | None = None
    ) -> List[WorkoutEntry]:
        """Return entries allowed by the visibility settings, oldest first."""
        return DataPartitioner.visible(
            self.entries.fetch_all_entries(), self._debug_settings(settings)
        )

    def home_summary(
        self,
        now: datetime.datetime | None = None,
        settings: DebugSettings | None = None,
    ) -> Dict[str, object]:
        now = self._now(now)
        entries = sorted(
            self.visible_entries(settings), key=lambda e: e.date, reverse=True
        )
        today = now.date()
        today_entry = next((e for e in entries if e.date.date() == today), None)
        week_entries = RangeFilter.within(entries, now, TimeRange.WEEK.days)
        streak = StreakCalculator.current_streak(entries, today)
        message, subtext = self.motivation(streak, len(week_entries), today_entry is not None)
        return {
            "today": today_entry.to_dict() if today_entry else None,
            "streak": streak,
            "week_count": len(week_entries),
            "week_minutes": Aggregator.total_minutes(week_entries),
            "message": message,
            "subtext": subtext,
            "recent": [e.to_dict() for e in entries[: self.RECENT_LIMIT]],
        }

    @staticmethod
    def motivation(streak: int, week_count: int, trained_today: bool) -> tuple[str, str]:
        """Return the headline and subtext shown on the home screen."""
        if streak >= 7:
            message = "🔥 Incredible Streak!"
        elif streak >= 3:
            message = "💪 Keep It Up!"
        elif week_count >= 5:
            message = "🌟 Amazing Week!"
        elif trained_today:
            message = "✨ Great Work Today!"
        else:
            message = "🚀 Ready to Start?"
        if streak >= 7:
            subtext = f"You've been consistent for {streak} days straight!"
        elif week_count >= 5:
            subtext = f"You've worked out {week_count} times this week!"
        elif trained_today:
            subtext = "You've completed your workout for today"
        else:
            subtext = "Every journey begins with a single step"
        return message, subtext

    def range_entries(
        self,
        time_range: TimeRange = TimeRange.MONTH,
        now: datetime.datetime | None = None,
        settings: DebugSettings | None = None,
    ) -> List[WorkoutEntry]:
        return RangeFilter.for_range(
            self.visible_entries(settings), self._now(now), time_range
        )

    def chart_summary(
        self,
        time_range: TimeRange = TimeRange.MONTH,
        now: datetime.datetime | None = None,
        settings: DebugSettings | None = None,
    ) -> Dict[str, object]:
        """Return the statistics and series behind the charts view."""
        entries = self.range_entries(time_range, now, settings)
        daily = Aggregator.daily_totals(entries)
        return {
            "range": time_range.key,
            "total_minutes": Aggregator.total_minutes(entries),
            "average_weight": round(Aggregator.average_weight(entries), 2),
            "workout_count": Aggregator.count(entries),
            "average_duration": Aggregator.average_duration(entries),
            "series": [
                {
                    "date": e.date.isoformat(timespec="seconds"),
                    "minutes": e.duration_minutes,
                    "weight": round(e.body_weight_kg, 2),
                }
                for e in entries
            ],
            "daily": [
                {"date": d.isoformat(), "minutes": m} for d, m in sorted(daily.items())
            ],
            "weekly": [
                {"week_start": w.isoformat(), "minutes": m}
                for w, m in Aggregator.weekly_totals(entries)
            ],
        }

    def daily_totals(
        self,
        time_range: Optional[TimeRange] = None,
        now: datetime.datetime | None = None,
        settings: DebugSettings | None = None,
    ) -> Dict[datetime.date, int]:
        if time_range is None:
            entries = self.visible_entries(settings)
        else:
            entries = self.range_entries(time_range, now, settings)
        return Aggregator.daily_totals(entries)

    def weekly_totals(
        self,
        time_range: Optional[TimeRange] = None,
        now: datetime.datetime | None = None,
        settings: DebugSettings | None = None,
    ) -> List[tuple[datetime.date, int]]:
        if time_range is None:
            entries = self.visible_entries(settings)
        else:
            entries = self.range_entries(time_range, now, settings)
        return Aggregator.weekly_totals(entries)

    def streaks(
        self,
        now: datetime.datetime | None = None,
        weeks_to_show: int = HeatmapBuilder.DEFAULT_WEEKS,
        settings: DebugSettings | None = None,
    ) -> Dict[str, int]:
        """Return the current streak and the longest streak in the heatmap window."""
        today = self._now(now).date()
        entries = self.visible_entries(settings)
        days = HeatmapBuilder.date_range(today, weeks_to_show)
        return {
            "current": StreakCalculator.current_streak(entries, today),
            "longest": StreakCalculator.longest_streak(
                days, Aggregator.daily_totals(entries)
            ),
        }

    def heatmap(
        self,
        weeks_to_show: int | None = None,
        now: datetime.datetime | None = None,
        settings: DebugSettings | None = None,
    ) -> HeatmapGrid:
        if weeks_to_show is None:
            weeks_to_show = (
                self.settings.get_int("weeks_to_show", HeatmapBuilder.DEFAULT_WEEKS)
                if self.settings is not None
                else HeatmapBuilder.DEFAULT_WEEKS
            )
        daily = Aggregator.daily_totals(self.visible_entries(settings))
        return HeatmapBuilder.build(daily, self._now(now).date(), weeks_to_show)

    def history(self, settings: DebugSettings | None = None) -> List[Dict[str, object]]:
        """Return visible entries grouped by calendar day, newest day first."""
        by_day: Dict[datetime.date, List[WorkoutEntry]] = {}
        for entry in self.visible_entries(settings):
            by_day.setdefault(entry.date.date(), []).append(entry)
        result = []
        for day in sorted(by_day, reverse=True):
            items = sorted(by_day[day], key=lambda e: e.date, reverse=True)
            result.append(
                {
                    "date": day.isoformat(),
                    "total_minutes": Aggregator.total_minutes(items),
                    "entries": [e.to_dict() for e in items],
                }
            )
        return result

    def debug_summary(self, settings: DebugSettings | None = None) -> Dict[str, object]:
        """Return entry counts per data source and the active visibility mode."""
        settings = self._debug_settings(settings)
        real, synthetic = DataPartitioner.split(self.entries.fetch_all_entries())
        mode = DataPartitioner.mode_for(settings)
        visible = DataPartitioner.partition(real + synthetic, mode)
        return {
            "real": len(real),
            "synthetic": len(synthetic),
            "total": len(real) + len(synthetic),
            "mode": mode.value,
            "visible": len(visible),
            "settings": settings.model_dump(),
        }
