"""Sort entity collections the way the standings tables present them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Sequence, TypeVar

from f1fantasy.models import EntityRecord


SortKey = Literal["display_name", "first_name", "last_name", "price", "season_score"]

SORT_KEYS: tuple[str, ...] = ("display_name", "first_name", "last_name", "price", "season_score")

_NUMERIC_KEYS = {"price", "season_score"}

E = TypeVar("E", bound=EntityRecord)


@dataclass(frozen=True)
class SortCriteria:
    """Column and direction for a standings table."""

    sort_by: SortKey = "season_score"
    sort_direction: Literal["asc", "desc"] = "desc"


def _sort_value(entity: EntityRecord, key: str) -> tuple[int, Any]:
    if not hasattr(entity, key):
        raise ValueError(f"{type(entity).__name__} has no column {key!r}")
    raw = getattr(entity, key)
    if key in _NUMERIC_KEYS:
        try:
            return (0, float(raw))
        except (TypeError, ValueError):
            pass
    return (1, str(raw).casefold())


def sort_entities(entities: Sequence[E], criteria: SortCriteria | None = None) -> List[E]:
    """Return a new list ordered by ``criteria``.

    Numeric columns compare as numbers; text columns compare case-insensitively.
    """

    criteria = criteria or SortCriteria()
    if criteria.sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort column {criteria.sort_by!r}")
    if criteria.sort_direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction {criteria.sort_direction!r}")
    reverse = criteria.sort_direction != "asc"
    return sorted(entities, key=lambda entity: _sort_value(entity, criteria.sort_by), reverse=reverse)
