"""Race calendar models."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Race(BaseModel):
    round: int = Field(..., ge=0)
    name: str
    date: dt.date

    model_config = ConfigDict(frozen=True)


class RaceInfo(BaseModel):
    """Most recent past race and next upcoming race relative to a day."""

    current_race: Optional[Race] = None
    upcoming_race: Optional[Race] = None

    model_config = ConfigDict(frozen=True)
