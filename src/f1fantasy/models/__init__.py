"""Canonical models shared across ingestion, API and CLI layers."""

from .schedule import Race, RaceInfo
from .season import ConstructorRecord, DriverRecord, EntityRecord, LoadResult, SeasonSnapshot

__all__ = [
    "ConstructorRecord",
    "DriverRecord",
    "EntityRecord",
    "LoadResult",
    "Race",
    "RaceInfo",
    "SeasonSnapshot",
]
