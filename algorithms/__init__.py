from .aggregator import Aggregator
from .data_partitioner import DataPartitioner, VisibilityMode
from .heatmap_builder import HeatmapBuilder, HeatmapCell, HeatmapGrid, IntensityLevel
from .mock_data_generator import MockDataGenerator
from .range_filter import RangeFilter, TimeRange
from .streak_calculator import StreakCalculator

__all__ = [
    "Aggregator",
    "DataPartitioner",
    "VisibilityMode",
    "HeatmapBuilder",
    "HeatmapCell",
    "HeatmapGrid",
    "IntensityLevel",
    "MockDataGenerator",
    "RangeFilter",
    "TimeRange",
    "StreakCalculator",
]
