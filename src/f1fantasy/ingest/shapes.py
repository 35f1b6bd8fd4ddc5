"""Classify decoded statistics payloads by upstream schema."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class PayloadShape(str, Enum):
    DETAILED = "detailed"
    SIMPLE = "simple"
    UNRECOGNIZED = "unrecognized"


def round_number(key: Any) -> int | None:
    """Return the integer round for a round key, or ``None`` if it is not one."""

    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str):
        text = key.strip()
        # isdigit() alone also accepts digits like "²" that int() rejects.
        if text.isascii() and text.isdigit():
            return int(text)
    return None


def detect_shape(payload: Any) -> PayloadShape:
    """Pure classification of a decoded payload.

    Detailed payloads carry ``seasonResult.raceResults`` keyed by round.
    Simple payloads are flat ``{round: {...}}`` tables with no ``seasonResult``.
    """

    if not isinstance(payload, Mapping):
        return PayloadShape.UNRECOGNIZED

    if "seasonResult" in payload:
        season_result = payload["seasonResult"]
        if isinstance(season_result, Mapping) and isinstance(season_result.get("raceResults"), Mapping):
            return PayloadShape.DETAILED
        return PayloadShape.UNRECOGNIZED

    if payload and all(
        round_number(key) is not None and isinstance(value, Mapping)
        for key, value in payload.items()
    ):
        return PayloadShape.SIMPLE
    return PayloadShape.UNRECOGNIZED
