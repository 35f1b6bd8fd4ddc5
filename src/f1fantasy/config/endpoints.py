"""Endpoint configuration for the upstream fantasy services."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping


logger = logging.getLogger(__name__)

DEFAULT_SEASON = 2025

BUNDLED_FALLBACK = Path(__file__).resolve().parent.parent / "data" / "fantasy-data.json"

_SEASON_ENV = "F1FANTASY_SEASON"
_LIVE_TIMEOUT_ENV = "F1FANTASY_LIVE_TIMEOUT"
_REQUEST_TIMEOUT_ENV = "F1FANTASY_REQUEST_TIMEOUT"

_LIVE_TIMEOUT_DEFAULT = 300.0
_REQUEST_TIMEOUT_DEFAULT = 30.0

_URL_DEFAULTS: Mapping[str, str] = {
    "stats_url": "https://f1fantasytools.com/api/statistics/{season}",
    "fallback_source": str(BUNDLED_FALLBACK),
    "driver_mapping_url": "https://manpreet1994.pythonanywhere.com/driver_mapping/{season}",
    "constructor_mapping_url": "https://manpreet1994.pythonanywhere.com/team_mapping/{season}",
    "schedule_url": "https://manpreet1994.pythonanywhere.com/schedule/{season}",
    "upstream_stats_url": "https://f1fantasytools.com/api/statistics/{season}",
}

_URL_ENV: Mapping[str, str] = {
    "stats_url": "F1FANTASY_STATS_URL",
    "fallback_source": "F1FANTASY_FALLBACK_SOURCE",
    "driver_mapping_url": "F1FANTASY_DRIVER_MAPPING_URL",
    "constructor_mapping_url": "F1FANTASY_CONSTRUCTOR_MAPPING_URL",
    "schedule_url": "F1FANTASY_SCHEDULE_URL",
    "upstream_stats_url": "F1FANTASY_UPSTREAM_STATS_URL",
}


@dataclass(frozen=True)
class EndpointConfig:
    """Where each upstream payload comes from for one season.

    URL fields are already formatted for ``season``; ``upstream_stats_url``
    keeps its ``{season}`` placeholder because the proxy formats it per request.
    ``fallback_source`` may be a URL or a local file path.
    """

    season: int
    stats_url: str
    fallback_source: str
    driver_mapping_url: str
    constructor_mapping_url: str
    schedule_url: str
    upstream_stats_url: str
    live_timeout: float = _LIVE_TIMEOUT_DEFAULT
    request_timeout: float = _REQUEST_TIMEOUT_DEFAULT

    def upstream_url_for(self, season: int | str) -> str:
        return self.upstream_stats_url.format(season=season)

    def with_overrides(self, **changes: object) -> "EndpointConfig":
        return replace(self, **changes)


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def load_config(season: int | None = None) -> EndpointConfig:
    """Build the endpoint config from defaults and ``F1FANTASY_*`` overrides."""

    resolved_season = season if season is not None else _env_int(_SEASON_ENV, DEFAULT_SEASON, min_value=1950)
    urls: dict[str, str] = {}
    for field_name, default in _URL_DEFAULTS.items():
        template = os.getenv(_URL_ENV[field_name]) or default
        if field_name == "upstream_stats_url":
            urls[field_name] = template
        else:
            urls[field_name] = template.format(season=resolved_season)
    return EndpointConfig(
        season=resolved_season,
        live_timeout=_env_float(_LIVE_TIMEOUT_ENV, _LIVE_TIMEOUT_DEFAULT, clamp_min=1.0),
        request_timeout=_env_float(_REQUEST_TIMEOUT_ENV, _REQUEST_TIMEOUT_DEFAULT, clamp_min=1.0),
        **urls,
    )
