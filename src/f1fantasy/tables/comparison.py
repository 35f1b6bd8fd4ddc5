"""Round-by-round comparison of two drivers or two constructors."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence, TypeVar

from f1fantasy.models import EntityRecord


E = TypeVar("E", bound=EntityRecord)


@dataclass(frozen=True)
class ComparisonPoint:
    round: str
    label: str
    first: int
    second: int


def find_entity(entities: Sequence[E], entity_id: str) -> Optional[E]:
    return next((entity for entity in entities if entity.id == entity_id), None)


def _round_sort_key(round_key: str) -> tuple[int, str]:
    return (int(round_key), round_key) if round_key.isdigit() else (10**9, round_key)


def _points(entity: EntityRecord, round_key: str) -> int:
    try:
        return int(entity.scores_by_race.get(round_key, "0"))
    except ValueError:
        return 0


def compare_entities(first: EntityRecord, second: EntityRecord) -> List[ComparisonPoint]:
    """Chart series over every round either entity scored in.

    Rounds are ordered numerically; a round missing for one side counts as 0.
    """

    if first.id == second.id:
        raise ValueError("comparison needs two different entities")
    rounds = set(first.scores_by_race) | set(second.scores_by_race)
    return [
        ComparisonPoint(
            round=round_key,
            label=f"R{round_key}",
            first=_points(first, round_key),
            second=_points(second, round_key),
        )
        for round_key in sorted(rounds, key=_round_sort_key)
    ]


def format_price(price: str) -> str:
    """``"12.5"`` -> ``"$12.5M"``."""

    try:
        amount = Decimal(price)
    except InvalidOperation:
        return price
    return f"${amount:.1f}M"
