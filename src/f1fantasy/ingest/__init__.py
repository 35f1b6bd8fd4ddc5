"""Input adapters that normalize raw upstream fantasy data."""

from .names import NameResolver, normalize_constructor_mapping, normalize_driver_mapping
from .schedule import normalize_schedule, partition_schedule
from .season import aggregate_season, split_display_name
from .shapes import PayloadShape, detect_shape
from .sources import SourceError, fetch_json

__all__ = [
    "NameResolver",
    "PayloadShape",
    "SourceError",
    "aggregate_season",
    "detect_shape",
    "fetch_json",
    "normalize_constructor_mapping",
    "normalize_driver_mapping",
    "normalize_schedule",
    "partition_schedule",
    "split_display_name",
]
