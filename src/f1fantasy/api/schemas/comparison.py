from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel


class ComparisonPointResponse(BaseModel):
    round: str
    label: str
    first: int
    second: int


class ComparedEntityResponse(BaseModel):
    id: str
    display_name: str
    price: str
    price_label: str
    season_score: str


class ComparisonResponse(BaseModel):
    kind: Literal["drivers", "constructors"]
    is_stale: bool
    first: ComparedEntityResponse
    second: ComparedEntityResponse
    points: List[ComparisonPointResponse]
