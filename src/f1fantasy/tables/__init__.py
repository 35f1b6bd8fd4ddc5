"""Presentation helpers for standings tables and comparisons."""

from .comparison import ComparisonPoint, compare_entities, find_entity, format_price
from .sorting import SORT_KEYS, SortCriteria, sort_entities

__all__ = [
    "ComparisonPoint",
    "SORT_KEYS",
    "SortCriteria",
    "compare_entities",
    "find_entity",
    "format_price",
    "sort_entities",
]
