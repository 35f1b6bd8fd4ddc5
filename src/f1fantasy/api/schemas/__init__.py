"""Pydantic models for API I/O."""

from .comparison import ComparedEntityResponse, ComparisonPointResponse, ComparisonResponse
from .standings import StandingsResponse

__all__ = [
    "ComparedEntityResponse",
    "ComparisonPointResponse",
    "ComparisonResponse",
    "StandingsResponse",
]
