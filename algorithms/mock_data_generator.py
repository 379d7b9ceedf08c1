import datetime
import logging
from typing import List

import numpy as np

from models import WorkoutEntry

logger = logging.getLogger(__name__)


class MockDataGenerator:
    """Produce synthetic workout entries for demos and testing."""

    WORKOUT_PROBABILITY: float = 0.7
    DURATIONS = (15, 20, 25, 30, 35, 40, 45, 50, 60, 75, 90, 120)
    BASE_WEIGHT: float = 70.0
    WEIGHT_VARIATION: float = 3.0
    NOTES = (
        "Great workout today! 💪",
        "Feeling strong",
        "Tough session but pushed through",
        "Easy recovery day",
        "Personal best!",
        "Feeling tired but completed it",
        "Amazing energy today",
        "Full body workout",
        "Cardio focused session",
        "Strength training day",
        "",
    )

    @classmethod
    def generate_entries(
        cls,
        count: int = 30,
        now: datetime.datetime | None = None,
        rng: np.random.Generator | None = None,
    ) -> List[WorkoutEntry]:
        """Return up to ``count`` synthetic entries covering the last ``count`` days.

        Each day gets an entry with probability ``WORKOUT_PROBABILITY``.
        The result is sorted by date, oldest first.
        """
        if count < 0:
            raise ValueError("count must be non-negative")
        now = now or datetime.datetime.now()
        rng = rng or np.random.default_rng()
        entries: List[WorkoutEntry] = []
        for days_ago in range(count):
            if rng.random() >= cls.WORKOUT_PROBABILITY:
                continue
            try:
                date = now - datetime.timedelta(days=days_ago)
            except OverflowError:
                logger.warning("skipping mock entry %d days before %s", days_ago, now)
                continue
            weight = cls.BASE_WEIGHT + rng.uniform(
                -cls.WEIGHT_VARIATION, cls.WEIGHT_VARIATION
            )
            entries.append(
                WorkoutEntry(
                    date=date,
                    duration_minutes=int(rng.choice(cls.DURATIONS)),
                    body_weight_kg=float(weight),
                    notes=str(rng.choice(cls.NOTES)),
                    is_synthetic=True,
                )
            )
        return sorted(entries, key=lambda e: e.date)
