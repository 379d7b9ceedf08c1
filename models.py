import datetime
import math

from pydantic import BaseModel, Field, field_validator

MIN_MINUTES = 5
MAX_MINUTES = 180


def local_naive(ts: datetime.datetime) -> datetime.datetime:
    """Convert an offset-aware timestamp to naive local time."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


class WorkoutEntry(BaseModel):
    """A single logged workout session."""

    id: int | None = None
    date: datetime.datetime = Field(default_factory=datetime.datetime.now)
    duration_minutes: int = 0
    body_weight_kg: float = 0.0
    notes: str = ""
    is_synthetic: bool = False

    @field_validator("date")
    @classmethod
    def _naive_date(cls, value: datetime.datetime) -> datetime.datetime:
        return local_naive(value)

    @property
    def day(self) -> datetime.date:
        """Calendar day the entry is bucketed under."""
        return self.date.date()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(timespec="seconds"),
            "duration_minutes": self.duration_minutes,
            "body_weight_kg": round(self.body_weight_kg, 2),
            "notes": self.notes,
            "is_synthetic": self.is_synthetic,
        }


class WorkoutDraft(BaseModel):
    """Validated input of the log/edit workout flow."""

    date: datetime.datetime = Field(default_factory=datetime.datetime.now)
    duration_minutes: int = 30
    body_weight_kg: float
    notes: str = ""

    @field_validator("date")
    @classmethod
    def _naive_date(cls, value: datetime.datetime) -> datetime.datetime:
        return local_naive(value)

    @field_validator("duration_minutes")
    @classmethod
    def _check_minutes(cls, value: int) -> int:
        if not MIN_MINUTES <= value <= MAX_MINUTES:
            raise ValueError(
                f"duration_minutes must be between {MIN_MINUTES} and {MAX_MINUTES}"
            )
        return value

    @field_validator("body_weight_kg")
    @classmethod
    def _check_weight(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("body_weight_kg must be a positive number")
        return value

    def to_entry(self, entry_id: int | None = None) -> WorkoutEntry:
        """Return a real (non-synthetic) entry carrying every draft field."""
        return WorkoutEntry(
            id=entry_id,
            date=self.date,
            duration_minutes=self.duration_minutes,
            body_weight_kg=self.body_weight_kg,
            notes=self.notes,
            is_synthetic=False,
        )
