"""Canonical season models handed from the ingestion layer to consumers."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class EntityRecord(BaseModel):
    """Season aggregate for one scored competitor."""

    id: str = Field(..., min_length=1)
    display_name: str
    price: str
    season_score: str
    scores_by_race: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class DriverRecord(EntityRecord):
    first_name: str
    last_name: str


class ConstructorRecord(EntityRecord):
    pass


class SeasonSnapshot(BaseModel):
    """Fully aggregated season produced by one load cycle."""

    last_updated: datetime
    season: int
    drivers: Tuple[DriverRecord, ...] = ()
    constructors: Tuple[ConstructorRecord, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.drivers and not self.constructors


class LoadResult(BaseModel):
    """Snapshot plus whether it came from the fallback source."""

    data: Optional[SeasonSnapshot] = None
    is_stale: bool = False

    model_config = ConfigDict(frozen=True)
