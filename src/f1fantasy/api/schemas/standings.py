from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Union

from pydantic import BaseModel

from f1fantasy.models import ConstructorRecord, DriverRecord


class StandingsResponse(BaseModel):
    kind: Literal["drivers", "constructors"]
    season: int
    last_updated: datetime
    is_stale: bool
    sort_by: str
    sort_direction: Literal["asc", "desc"]
    entities: List[Union[DriverRecord, ConstructorRecord]]
