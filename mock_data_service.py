import datetime
import logging

import numpy as np

from algorithms import MockDataGenerator
from db import SettingsRepository, WorkoutEntryRepository
from models import WorkoutEntry

logger = logging.getLogger(__name__)


class MockDataService:
    """Manage generated sample entries alongside real ones."""

    def __init__(
        self,
        entry_repo: WorkoutEntryRepository,
        settings_repo: SettingsRepository | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.entries = entry_repo
        self.settings = settings_repo
        self.rng = rng

    def _count(self, count: int | None) -> int:
        if count is not None:
            return count
        if self.settings is not None:
            return self.settings.debug_settings().mock_data_count
        return 30

    def populate(
        self, count: int | None = None, now: datetime.datetime | None = None
    ) -> list[WorkoutEntry]:
        """Replace all synthetic entries with a fresh batch; real entries stay."""
        batch = MockDataGenerator.generate_entries(self._count(count), now, self.rng)
        removed, ids = self.entries.replace_synthetic(batch)
        for entry, entry_id in zip(batch, ids):
            entry.id = entry_id
        logger.info("replaced %d synthetic entries with %d new ones", removed, len(batch))
        return batch

    def clear_mock_data(self) -> int:
        removed = self.entries.delete_synthetic()
        logger.info("removed %d synthetic entries", removed)
        return removed

    def clear_all_data(self) -> int:
        removed = self.entries.delete_all()
        logger.info("removed all %d entries", removed)
        return removed
