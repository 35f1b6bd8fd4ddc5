"""Aggregate per-round fantasy results into season records."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from f1fantasy.ingest.names import NameResolver
from f1fantasy.ingest.shapes import PayloadShape, round_number
from f1fantasy.models import ConstructorRecord, DriverRecord, SeasonSnapshot


logger = logging.getLogger(__name__)

_SIMPLE_RESERVED_KEYS = {"drivers", "constructors"}


@dataclass
class _Tally:
    """Running totals for one entity while rounds are replayed in order."""

    entity_id: str
    display_name: str
    price: str = "0"
    total: int = 0
    scores: dict[str, int] = field(default_factory=dict)

    def add(self, round_key: str, points: int, price: str) -> None:
        # A repeated entry for the same round replaces the earlier one.
        previous = self.scores.get(round_key)
        if previous is not None:
            self.total -= previous
        self.scores[round_key] = points
        self.total += points
        self.price = price


def _coerce_points(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value)) if math.isfinite(value) else 0
    if not isinstance(value, str):
        return 0
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return 0
    if not amount.is_finite():
        return 0
    return int(amount.to_integral_value())


def _format_price(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return "0"
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return "0"
    if not amount.is_finite():
        return "0"
    return format(amount.normalize(), "f")


def split_display_name(display_name: str) -> Tuple[str, str]:
    parts = display_name.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


def _sorted_rounds(rounds: Mapping[Any, Any]) -> List[Tuple[str, Any]]:
    numbered: list[tuple[int, Any]] = []
    for key, value in rounds.items():
        number = round_number(key)
        if number is None:
            logger.debug("Skipping non-numeric round key %r", key)
            continue
        numbered.append((number, value))
    numbered.sort(key=lambda item: item[0])
    return [(str(number), value) for number, value in numbered]


def _entries(value: Any) -> Iterable[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, Mapping)]


def _season_from_payload(season_result: Mapping[str, Any], default: int) -> int:
    value = season_result.get("season")
    number = round_number(value)
    return number if number is not None else default


def _aggregate_detailed(
    raw: Mapping[str, Any],
    resolver: NameResolver,
) -> Tuple[dict[str, _Tally], dict[str, _Tally]]:
    drivers: dict[str, _Tally] = {}
    constructors: dict[str, _Tally] = {}
    race_results = raw["seasonResult"]["raceResults"]

    for round_key, race in _sorted_rounds(race_results):
        if not isinstance(race, Mapping) or (not race.get("drivers") and not race.get("constructors")):
            logger.debug("Round %s has no driver or constructor data; skipping", round_key)
            continue

        for entry in _entries(race.get("drivers")):
            raw_id = entry.get("id")
            if not entry.get("isActive") or not raw_id:
                continue
            raw_id = str(raw_id)
            tally = drivers.get(raw_id)
            if tally is None:
                tally = drivers[raw_id] = _Tally(raw_id, resolver.resolve_driver_name(raw_id))
            tally.add(round_key, _coerce_points(entry.get("totalPoints")), _format_price(entry.get("price")))

        for entry in _entries(race.get("constructors")):
            raw_id = entry.get("id")
            if not raw_id:
                continue
            raw_id = str(raw_id)
            tally = constructors.get(raw_id)
            if tally is None:
                tally = constructors[raw_id] = _Tally(raw_id, resolver.resolve_constructor_name(raw_id))
            tally.add(round_key, _coerce_points(entry.get("totalPoints")), _format_price(entry.get("price")))

    return drivers, constructors


def _simple_driver_entries(round_data: Mapping[str, Any]) -> List[Tuple[str, Mapping[str, Any]]]:
    nested = round_data.get("drivers")
    if isinstance(nested, Mapping):
        pairs: Iterable[tuple[Any, Any]] = nested.items()
    else:
        # Older payloads put driver entries directly on the round.
        pairs = ((key, value) for key, value in round_data.items() if key not in _SIMPLE_RESERVED_KEYS)
    return [(str(abbr), entry) for abbr, entry in pairs if isinstance(entry, Mapping)]


def _aggregate_simple(raw: Mapping[str, Any], resolver: NameResolver) -> dict[str, _Tally]:
    drivers: dict[str, _Tally] = {}
    for round_key, round_data in _sorted_rounds(raw):
        entries = _simple_driver_entries(round_data)
        if not entries:
            logger.debug("Round %s has no driver data; skipping", round_key)
            continue
        for abbr, entry in entries:
            # Only the abbreviation identifies a driver in this shape.
            tally = drivers.get(abbr)
            if tally is None:
                tally = drivers[abbr] = _Tally(abbr, resolver.resolve_driver_name(abbr))
            tally.add(round_key, _coerce_points(entry.get("fantasy_score")), _format_price(entry.get("fantasy_cost")))
    return drivers


def _to_driver(tally: _Tally) -> DriverRecord:
    first_name, last_name = split_display_name(tally.display_name)
    return DriverRecord(
        id=tally.entity_id,
        display_name=tally.display_name,
        first_name=first_name,
        last_name=last_name,
        price=tally.price,
        season_score=str(tally.total),
        scores_by_race={key: str(points) for key, points in tally.scores.items()},
    )


def _to_constructor(tally: _Tally) -> ConstructorRecord:
    return ConstructorRecord(
        id=tally.entity_id,
        display_name=tally.display_name,
        price=tally.price,
        season_score=str(tally.total),
        scores_by_race={key: str(points) for key, points in tally.scores.items()},
    )


def aggregate_season(
    raw: Any,
    shape: PayloadShape,
    resolver: NameResolver,
    *,
    season: int,
    now: Optional[datetime] = None,
) -> SeasonSnapshot:
    """Replay every round of ``raw`` in ascending order and freeze the totals.

    ``season`` is used unless a detailed payload names its own season. An
    unrecognized payload yields an empty snapshot rather than an error.
    """

    drivers: dict[str, _Tally] = {}
    constructors: dict[str, _Tally] = {}
    if shape is PayloadShape.DETAILED:
        drivers, constructors = _aggregate_detailed(raw, resolver)
        season = _season_from_payload(raw["seasonResult"], season)
    elif shape is PayloadShape.SIMPLE:
        drivers = _aggregate_simple(raw, resolver)
    else:
        logger.warning("Unrecognized statistics payload; producing an empty snapshot")

    return SeasonSnapshot(
        last_updated=now or datetime.now(timezone.utc),
        season=season,
        drivers=tuple(_to_driver(tally) for tally in drivers.values()),
        constructors=tuple(_to_constructor(tally) for tally in constructors.values()),
    )
