import argparse
import csv
import json
import logging
import shutil

from db import WorkoutEntryRepository, SettingsRepository
from mock_data_service import MockDataService
from stats_service import StatisticsService
from algorithms import TimeRange


def export_entries(db_path: str, fmt: str, out_path: str) -> int:
    """Write every stored entry to ``out_path`` and return the number written."""
    entries = [e.to_dict() for e in WorkoutEntryRepository(db_path).fetch_all_entries()]
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        if fmt == "json":
            json.dump(entries, f, indent=2, ensure_ascii=False)
        else:
            writer = csv.DictWriter(
                f,
                fieldnames=[
                    "id",
                    "date",
                    "duration_minutes",
                    "body_weight_kg",
                    "notes",
                    "is_synthetic",
                ],
            )
            writer.writeheader()
            writer.writerows(entries)
    return len(entries)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def generate_mock_data(db_path: str, yaml_path: str, count: int | None = None) -> int:
    settings = SettingsRepository(db_path, yaml_path)
    service = MockDataService(WorkoutEntryRepository(db_path), settings)
    return len(service.populate(count))


def clear_mock_data(db_path: str) -> int:
    return MockDataService(WorkoutEntryRepository(db_path)).clear_mock_data()


def clear_all_data(db_path: str) -> int:
    entries = WorkoutEntryRepository(db_path)
    removed = MockDataService(entries).clear_all_data()
    entries.vacuum()
    return removed


def summary(db_path: str, yaml_path: str, time_range: str = "month") -> dict:
    settings = SettingsRepository(db_path, yaml_path)
    stats = StatisticsService(WorkoutEntryRepository(db_path), settings)
    charts = stats.chart_summary(TimeRange.from_key(time_range))
    return {
        "debug": stats.debug_summary(),
        "streaks": stats.streaks(),
        "total_minutes": charts["total_minutes"],
        "average_weight": charts["average_weight"],
        "workout_count": charts["workout_count"],
        "average_duration": charts["average_duration"],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate")
    gen.add_argument("--db", default="workout.db")
    gen.add_argument("--yaml", default="settings.yaml")
    gen.add_argument("--count", type=int, default=None)

    clr = sub.add_parser("clear_mock")
    clr.add_argument("--db", default="workout.db")

    wipe = sub.add_parser("clear_all")
    wipe.add_argument("--db", default="workout.db")

    summ = sub.add_parser("summary")
    summ.add_argument("--db", default="workout.db")
    summ.add_argument("--yaml", default="settings.yaml")
    summ.add_argument(
        "--range", dest="time_range", choices=[t.key for t in TimeRange], default="month"
    )

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="workout.db")
    exp.add_argument("--fmt", choices=["csv", "json"], default="csv")
    exp.add_argument("--out", default="workouts.csv")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="workout.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="workout.db")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        if args.cmd == "generate":
            print(f"Generated {generate_mock_data(args.db, args.yaml, args.count)} mock entries")
        elif args.cmd == "clear_mock":
            print(f"Removed {clear_mock_data(args.db)} mock entries")
        elif args.cmd == "clear_all":
            print(f"Removed {clear_all_data(args.db)} entries")
        elif args.cmd == "summary":
            print(json.dumps(summary(args.db, args.yaml, args.time_range), indent=2))
        elif args.cmd == "export":
            print(f"Exported {export_entries(args.db, args.fmt, args.out)} entries")
        elif args.cmd == "backup":
            backup_db(args.db, args.out)
        elif args.cmd == "restore":
            restore_db(args.src, args.db)
    except ValueError as e:
        parser.exit(1, f"error: {e}\n")


if __name__ == "__main__":
    main()
