import datetime
from fastapi import FastAPI, HTTPException, APIRouter
from pydantic import ValidationError

from config import APP_VERSION
from db import WorkoutEntryRepository, SettingsRepository
from models import WorkoutDraft, local_naive
from settings_schema import DebugSettings
from stats_service import StatisticsService
from mock_data_service import MockDataService
from algorithms import TimeRange


def _parse_date(date: str | None) -> datetime.datetime:
    if date is None:
        return datetime.datetime.now()
    try:
        return local_naive(datetime.datetime.fromisoformat(date))
    except (ValueError, OverflowError):
        raise HTTPException(
            status_code=400,
            detail="date must be an ISO 8601 date or datetime",
        )


def _parse_range(time_range: str | None) -> TimeRange | None:
    if time_range is None:
        return None
    try:
        return TimeRange.from_key(time_range)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _draft(
    date: str | None, duration_minutes: int, body_weight_kg: float, notes: str
) -> WorkoutDraft:
    try:
        return WorkoutDraft(
            date=_parse_date(date),
            duration_minutes=duration_minutes,
            body_weight_kg=body_weight_kg,
            notes=notes,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


class ForceAPI:
    """Provides REST endpoints for workout logging and its derived views."""

    def __init__(
        self,
        db_path: str = "workout.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.entries = WorkoutEntryRepository(db_path)
        self.statistics = StatisticsService(self.entries, self.settings)
        self.mock_data = MockDataService(self.entries, self.settings)
        self.app = FastAPI(
            title="Force API",
            description="REST API for workout logging and activity statistics",
            version=APP_VERSION,
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        workouts_router = APIRouter(prefix="/workouts", tags=["Workouts"])
        stats_router = APIRouter(prefix="/stats", tags=["Statistics"])
        debug_router = APIRouter(prefix="/debug", tags=["Debug"])

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            try:
                self.entries.counts()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @workouts_router.post(
            "",
            summary="Log workout",
            description="Record a workout session entered by the user.",
        )
        def create_workout(
            body_weight_kg: float,
            duration_minutes: int = 30,
            date: str | None = None,
            notes: str = "",
        ):
            draft = _draft(date, duration_minutes, body_weight_kg, notes)
            entry_id = self.entries.add(draft.to_entry())
            return {"id": entry_id}

        @workouts_router.get(
            "",
            summary="List workouts",
            description="Visible workouts, newest first.",
        )
        def list_workouts():
            entries = self.statistics.visible_entries()
            return [e.to_dict() for e in sorted(entries, key=lambda e: e.date, reverse=True)]

        @workouts_router.get("/{entry_id}")
        def get_workout(entry_id: int):
            try:
                return self.entries.fetch(entry_id).to_dict()
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @workouts_router.put("/{entry_id}")
        def update_workout(
            entry_id: int,
            body_weight_kg: float,
            duration_minutes: int,
            date: str | None = None,
            notes: str = "",
        ):
            draft = _draft(date, duration_minutes, body_weight_kg, notes)
            try:
                self.entries.update(entry_id, draft.to_entry(entry_id))
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "updated"}

        @workouts_router.delete("/{entry_id}")
        def delete_workout(entry_id: int):
            try:
                self.entries.delete(entry_id)
                return {"status": "deleted"}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @stats_router.get("/home")
        def stats_home():
            return self.statistics.home_summary()

        @stats_router.get("/charts")
        def stats_charts(time_range: str = "month"):
            return self.statistics.chart_summary(_parse_range(time_range))

        @stats_router.get("/daily_totals")
        def stats_daily_totals(time_range: str | None = None):
            totals = self.statistics.daily_totals(_parse_range(time_range))
            return [
                {"date": d.isoformat(), "minutes": m} for d, m in sorted(totals.items())
            ]

        @stats_router.get("/weekly_totals")
        def stats_weekly_totals(time_range: str | None = None):
            return [
                {"week_start": w.isoformat(), "minutes": m}
                for w, m in self.statistics.weekly_totals(_parse_range(time_range))
            ]

        @stats_router.get("/streak")
        def stats_streak(weeks: int = 26):
            if weeks < 1:
                raise HTTPException(status_code=400, detail="weeks must be positive")
            return self.statistics.streaks(weeks_to_show=weeks)

        @stats_router.get("/heatmap")
        def stats_heatmap(weeks: int | None = None):
            try:
                return self.statistics.heatmap(weeks).to_dict()
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/history", tags=["Workouts"])
        def history():
            return self.statistics.history()

        @self.app.get("/settings/debug", tags=["Settings"])
        def get_debug_settings():
            return self.settings.debug_settings().model_dump()

        @self.app.put("/settings/debug", tags=["Settings"])
        def update_debug_settings(
            use_mock_data: bool | None = None,
            mock_data_count: int | None = None,
            show_all_data: bool | None = None,
        ):
            current = self.settings.debug_settings().model_dump()
            for key, value in (
                ("use_mock_data", use_mock_data),
                ("mock_data_count", mock_data_count),
                ("show_all_data", show_all_data),
            ):
                if value is not None:
                    current[key] = value
            try:
                settings = DebugSettings(**current)
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=str(e))
            self.settings.save_debug_settings(settings)
            return settings.model_dump()

        @self.app.post("/settings/debug/reset", tags=["Settings"])
        def reset_debug_settings():
            return self.settings.reset_debug_settings().model_dump()

        @debug_router.get("/summary")
        def debug_summary():
            return self.statistics.debug_summary()

        @debug_router.post("/mock_data")
        def generate_mock_data(count: int | None = None):
            if count is not None and count < 0:
                raise HTTPException(status_code=400, detail="count must be non-negative")
            batch = self.mock_data.populate(count)
            return {"generated": len(batch)}

        @debug_router.delete("/mock_data")
        def clear_mock_data():
            return {"deleted": self.mock_data.clear_mock_data()}

        @debug_router.delete("/all_data")
        def clear_all_data():
            return {"deleted": self.mock_data.clear_all_data()}

        self.app.include_router(workouts_router)
        self.app.include_router(stats_router)
        self.app.include_router(debug_router)


if __name__ == "__main__":
    import os
    import uvicorn

    api = ForceAPI(
        db_path=os.environ.get("DB_PATH", "workout.db"),
        yaml_path=os.environ.get("YAML_PATH", "settings.yaml"),
    )
    uvicorn.run(api.app)
