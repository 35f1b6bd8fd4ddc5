"""Normalize race calendars and find the current and upcoming race."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, List, Mapping, Optional, Sequence

from f1fantasy.ingest.shapes import round_number
from f1fantasy.models import Race, RaceInfo


logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return dt.date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _race_name(entry: Mapping[str, Any]) -> str:
    # The schedule API has shipped the name as both ``name`` and ``race_name``.
    for key in ("name", "race_name"):
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def normalize_schedule(payload: Any) -> List[Race]:
    """Turn ``{"races": [...]}`` or a bare list into canonical :class:`Race` rows."""

    if isinstance(payload, Mapping):
        entries = payload.get("races")
    else:
        entries = payload
    if not isinstance(entries, list):
        raise ValueError("schedule payload has no race list")

    races: List[Race] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        race_date = _parse_date(entry.get("date"))
        race_round = round_number(entry.get("round"))
        if race_date is None or race_round is None or race_round < 0:
            logger.debug("Dropping schedule entry without usable round/date: %r", entry)
            continue
        races.append(Race(round=race_round, name=_race_name(entry), date=race_date))
    return races


def partition_schedule(races: Sequence[Race], today: dt.date) -> RaceInfo:
    """Latest race before ``today`` and earliest race on or after it."""

    current: Optional[Race] = None
    upcoming: Optional[Race] = None
    for race in sorted(races, key=lambda item: item.date):
        if race.date < today:
            current = race
        elif upcoming is None:
            upcoming = race
    return RaceInfo(current_race=current, upcoming_race=upcoming)
