import enum
from typing import Iterable, List, Tuple

from models import WorkoutEntry
from settings_schema import DebugSettings


class VisibilityMode(enum.Enum):
    SHOW_ALL = "show_all"
    SYNTHETIC = "synthetic"
    REAL_ONLY = "real_only"


class DataPartitioner:
    """Split entries into real and synthetic subsets."""

    @staticmethod
    def mode_for(settings: DebugSettings) -> VisibilityMode:
        """Return the active mode; ``show_all_data`` wins over ``use_mock_data``."""
        if settings.show_all_data:
            return VisibilityMode.SHOW_ALL
        if settings.use_mock_data:
            return VisibilityMode.SYNTHETIC
        return VisibilityMode.REAL_ONLY

    @staticmethod
    def partition(
        entries: Iterable[WorkoutEntry], mode: VisibilityMode
    ) -> List[WorkoutEntry]:
        if mode is VisibilityMode.SHOW_ALL:
            return list(entries)
        if mode is VisibilityMode.SYNTHETIC:
            return [e for e in entries if e.is_synthetic]
        return [e for e in entries if not e.is_synthetic]

    @staticmethod
    def visible(
        entries: Iterable[WorkoutEntry], settings: DebugSettings
    ) -> List[WorkoutEntry]:
        return DataPartitioner.partition(entries, DataPartitioner.mode_for(settings))

    @staticmethod
    def split(
        entries: Iterable[WorkoutEntry],
    ) -> Tuple[List[WorkoutEntry], List[WorkoutEntry]]:
        """Return ``(real, synthetic)`` entries."""
        real: List[WorkoutEntry] = []
        synthetic: List[WorkoutEntry] = []
        for entry in entries:
            (synthetic if entry.is_synthetic else real).append(entry)
        return real, synthetic
