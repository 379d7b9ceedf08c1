import datetime
import os
import warnings

import altair as alt
import pandas as pd
import streamlit as st
from altair.utils.deprecation import AltairDeprecationWarning

warnings.filterwarnings("ignore", category=AltairDeprecationWarning)
from pydantic import ValidationError

from algorithms import HeatmapBuilder, TimeRange
from algorithms.heatmap_builder import LEGEND_MINUTES, WEEKDAY_LABELS
from db import SettingsRepository, WorkoutEntryRepository
from mock_data_service import MockDataService
from models import MAX_MINUTES, MIN_MINUTES, WorkoutDraft
from settings_schema import (
    DebugSettings,
    MOCK_DATA_COUNT_MAX,
    MOCK_DATA_COUNT_MIN,
    MOCK_DATA_COUNT_STEP,
)
from stats_service import StatisticsService

ACCENT = "#ff4b4b"


class ForceApp:
    """Streamlit application for workout logging."""

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        self.settings_repo = SettingsRepository(db_path, yaml_path)
        self.entries = WorkoutEntryRepository(db_path)
        self.statistics = StatisticsService(self.entries, self.settings_repo)
        self.mock_data = MockDataService(self.entries, self.settings_repo)

    def run(self) -> None:
        st.set_page_config(page_title="Force", layout="wide")
        st.title("Force")
        home_tab, charts_tab, history_tab, debug_tab = st.tabs(
            ["Home", "Charts", "History", "Debug"]
        )
        with home_tab:
            self._home_tab()
        with charts_tab:
            self._charts_tab()
        with history_tab:
            self._history_tab()
        with debug_tab:
            self._debug_tab()

    def _workout_form(self, key: str, entry=None) -> None:
        with st.form(key):
            date = st.date_input(
                "Date",
                entry.date.date() if entry else datetime.date.today(),
                key=f"{key}_date",
            )
            minutes = st.slider(
                "Workout Minutes",
                MIN_MINUTES,
                MAX_MINUTES,
                entry.duration_minutes if entry else 30,
                step=5,
                key=f"{key}_minutes",
            )
            weight = st.text_input(
                "Weight (kg)",
                f"{entry.body_weight_kg:.1f}" if entry else "",
                key=f"{key}_weight",
            )
            notes = st.text_area("Notes", entry.notes if entry else "", key=f"{key}_notes")
            submitted = st.form_submit_button("Update Workout" if entry else "Save Workout")
        if not submitted:
            return
        try:
            time_of_day = entry.date.time() if entry else datetime.datetime.now().time()
            draft = WorkoutDraft(
                date=datetime.datetime.combine(date, time_of_day),
                duration_minutes=minutes,
                body_weight_kg=float(weight),
                notes=notes,
            )
        except (ValueError, ValidationError):
            st.warning("Enter a positive weight in kg.")
            return
        if entry:
            self.entries.update(entry.id, draft.to_entry(entry.id))
        else:
            self.entries.add(draft.to_entry())
        st.success("Workout saved")
        st.rerun()

    def _home_tab(self) -> None:
        summary = self.statistics.home_summary()
        cols = st.columns(3)
        cols[0].metric("Day Streak", summary["streak"])
        cols[1].metric("This Week", summary["week_count"])
        cols[2].metric("Minutes This Week", summary["week_minutes"])
        st.subheader("Today's Progress")
        today = summary["today"]
        if today:
            st.write(f"{today['duration_minutes']} min · {today['body_weight_kg']:.1f} kg")
            if today["notes"]:
                st.caption(today["notes"])
        else:
            st.write("No workout logged today.")
        with st.expander("Log Workout", expanded=today is None):
            self._workout_form("home_log")
        st.subheader(summary["message"])
        st.caption(summary["subtext"])
        if summary["recent"]:
            st.subheader("Recent Activity")
            for item in summary["recent"]:
                st.write(f"{item['date'][:10]} · {item['duration_minutes']} min")

    def _charts_tab(self) -> None:
        labels = {t.label: t for t in TimeRange}
        choice = st.radio(
            "Time Range", list(labels), index=1, horizontal=True, key="chart_range"
        )
        data = self.statistics.chart_summary(labels[choice])
        if not data["series"]:
            st.info("No data for this period.")
        else:
            cols = st.columns(4)
            cols[0].metric("Total Minutes", data["total_minutes"])
            cols[1].metric("Avg Weight", f"{data['average_weight']:.1f} kg")
            cols[2].metric("Workouts", data["workout_count"])
            cols[3].metric("Avg Duration", f"{data['average_duration']} min")
            df = pd.DataFrame(data["series"])
            df["date"] = pd.to_datetime(df["date"])
            st.altair_chart(
                alt.Chart(df)
                .mark_bar(color=ACCENT)
                .encode(
                    x=alt.X("yearmonthdate(date):T", title="Date"),
                    y=alt.Y("sum(minutes):Q", title="Minutes"),
                )
            )
            st.altair_chart(
                alt.Chart(df)
                .mark_line(point=True)
                .encode(
                    x=alt.X("date:T", title="Date"),
                    y=alt.Y("weight:Q", title="Weight (kg)", scale=alt.Scale(zero=False)),
                )
            )
            weekly = pd.DataFrame(data["weekly"])
            st.altair_chart(
                alt.Chart(weekly)
                .mark_bar(color=ACCENT)
                .encode(
                    x=alt.X("week_start:T", title="Week"),
                    y=alt.Y("minutes:Q", title="Minutes"),
                )
            )
        self._heatmap()

    def _heatmap(self) -> None:
        st.subheader("Activity Heatmap")
        grid = self.statistics.heatmap()
        rows = [
            {
                "week": idx,
                "weekday": WEEKDAY_LABELS[(cell.day.weekday() + 1) % 7],
                "row": (cell.day.weekday() + 1) % 7,
                "date": cell.day.isoformat(),
                "minutes": cell.minutes,
                "opacity": cell.level.opacity,
            }
            for idx, week in enumerate(grid.weeks)
            for cell in week
        ]
        if rows:
            df = pd.DataFrame(rows)
            chart = (
                alt.Chart(df)
                .mark_rect(color=ACCENT, stroke="white")
                .encode(
                    x=alt.X("week:O", axis=None),
                    y=alt.Y("row:O", axis=None),
                    opacity=alt.Opacity("opacity:Q", scale=None),
                    tooltip=["date", "minutes"],
                )
            )
            st.altair_chart(chart)
        st.caption(
            "Less "
            + " ".join(str(HeatmapBuilder.intensity_for_minutes(m).rank) for m in LEGEND_MINUTES)
            + " More · "
            + ", ".join(label for _idx, label in grid.month_labels)
        )
        cols = st.columns(3)
        cols[0].metric("Active Days", grid.active_days)
        cols[1].metric("Longest Streak", grid.longest_streak)
        cols[2].metric("Total Time", f"{grid.total_minutes // 60}h")

    def _history_tab(self) -> None:
        st.header("Workout History")
        days = self.statistics.history()
        if not days:
            st.info("No workouts yet.")
            return
        for day in days:
            st.subheader(f"{day['date']} · {day['total_minutes']} min")
            for item in day["entries"]:
                cols = st.columns([4, 1, 1])
                badge = " 🏆" if item["duration_minutes"] >= 60 else ""
                cols[0].write(
                    f"{item['date'][11:16]} · {item['duration_minutes']} min · "
                    f"{item['body_weight_kg']:.1f} kg{badge}"
                )
                if item["notes"]:
                    cols[0].caption(item["notes"])
                if cols[1].button("Edit", key=f"edit_{item['id']}"):
                    st.session_state.editing_entry = item["id"]
                if cols[2].button("Delete", key=f"del_{item['id']}"):
                    self.entries.delete(item["id"])
                    st.rerun()
        editing = st.session_state.get("editing_entry")
        if editing is not None:
            try:
                entry = self.entries.fetch(editing)
            except ValueError:
                st.session_state.editing_entry = None
                return
            st.subheader("Edit Workout")
            self._workout_form(f"edit_form_{editing}", entry)

    def _debug_tab(self) -> None:
        st.header("Debug")
        settings = self.settings_repo.debug_settings()
        show_all = st.toggle("Show All Data", settings.show_all_data, key="dbg_show_all")
        use_mock = st.toggle(
            "Use Mock Data",
            settings.use_mock_data,
            key="dbg_use_mock",
            disabled=show_all,
        )
        count = st.slider(
            "Mock Data Days",
            MOCK_DATA_COUNT_MIN,
            MOCK_DATA_COUNT_MAX,
            settings.mock_data_count,
            step=MOCK_DATA_COUNT_STEP,
            key="dbg_count",
        )
        updated = DebugSettings(
            use_mock_data=use_mock, mock_data_count=count, show_all_data=show_all
        )
        if updated != settings:
            self.settings_repo.save_debug_settings(updated)
            settings = updated
        summary = self.statistics.debug_summary(settings)
        cols = st.columns(4)
        cols[0].metric("Real Entries", summary["real"])
        cols[1].metric("Mock Entries", summary["synthetic"])
        cols[2].metric("Showing", summary["visible"])
        cols[3].metric("Total", summary["total"])
        if st.button("Generate Mock Data", key="dbg_generate"):
            self.mock_data.populate(settings.mock_data_count)
            st.rerun()
        if st.button("Clear Mock Data", key="dbg_clear_mock"):
            self.mock_data.clear_mock_data()
            st.rerun()
        if st.button("Clear All Data", key="dbg_clear_all"):
            self.mock_data.clear_all_data()
            st.rerun()
        if st.button("Reset Settings", key="dbg_reset"):
            self.settings_repo.reset_debug_settings()
            for key in ("dbg_show_all", "dbg_use_mock", "dbg_count"):
                st.session_state.pop(key, None)
            st.rerun()


if __name__ == "__main__":
    db_path = os.environ.get("DB_PATH", "workout.db")
    yaml_path = os.environ.get("YAML_PATH", "settings.yaml")
    ForceApp(db_path=db_path, yaml_path=yaml_path).run()
