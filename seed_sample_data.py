import datetime
from db import WorkoutEntryRepository
from models import WorkoutDraft


def seed(db_path: str = "workout.db") -> None:
    entries = WorkoutEntryRepository(db_path)
    if entries.fetch_all_entries():
        print("Database already contains workouts")
        return

    draft = WorkoutDraft(
        date=datetime.datetime.now(),
        duration_minutes=45,
        body_weight_kg=72.5,
        notes="Sample session",
    )
    entries.add(draft.to_entry())
    print("Seed data inserted")


if __name__ == "__main__":
    seed()
