"""Load season snapshots with a live source and a stale fallback."""

from __future__ import annotations

import datetime as dt
import logging
from enum import Enum
from typing import Optional

import httpx

from f1fantasy.config import EndpointConfig
from f1fantasy.ingest import (
    NameResolver,
    SourceError,
    aggregate_season,
    detect_shape,
    fetch_json,
    normalize_schedule,
    partition_schedule,
)
from f1fantasy.models import LoadResult, RaceInfo, SeasonSnapshot


logger = logging.getLogger(__name__)


class LoadStage(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


class FantasyDataLoader:
    """Fetch, classify and aggregate season statistics.

    :meth:`load` tries the live endpoint first and the fallback source second;
    the result says which one answered. Neither :meth:`load` nor
    :meth:`load_schedule` raises.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: EndpointConfig,
        *,
        resolver: NameResolver | None = None,
    ):
        self.client = client
        self.config = config
        self.resolver = resolver or NameResolver(
            client,
            driver_mapping_url=config.driver_mapping_url,
            constructor_mapping_url=config.constructor_mapping_url,
            timeout=config.request_timeout,
        )

    def _stage_source(self, stage: LoadStage) -> tuple[str, float]:
        if stage is LoadStage.LIVE:
            return self.config.stats_url, self.config.live_timeout
        return self.config.fallback_source, self.config.request_timeout

    async def _attempt(self, stage: LoadStage) -> SeasonSnapshot:
        location, timeout = self._stage_source(stage)
        await self.resolver.ensure_loaded()
        raw = await fetch_json(self.client, location, timeout=timeout)
        shape = detect_shape(raw)
        snapshot = aggregate_season(raw, shape, self.resolver, season=self.config.season)
        logger.info(
            "Loaded %s season %s from %s (%s payload, %s drivers, %s constructors)",
            stage.value,
            snapshot.season,
            location,
            shape.value,
            len(snapshot.drivers),
            len(snapshot.constructors),
        )
        return snapshot

    async def load(self) -> LoadResult:
        for stage in (LoadStage.LIVE, LoadStage.FALLBACK):
            try:
                snapshot = await self._attempt(stage)
            except SourceError as exc:
                logger.warning("Failed to load %s fantasy data: %s", stage.value, exc)
                continue
            except Exception:
                logger.exception("Unexpected error loading %s fantasy data", stage.value)
                continue
            return LoadResult(data=snapshot, is_stale=stage is LoadStage.FALLBACK)
        return LoadResult(data=None, is_stale=True)

    async def load_schedule(self, *, today: Optional[dt.date] = None) -> RaceInfo:
        try:
            payload = await fetch_json(self.client, self.config.schedule_url, timeout=self.config.request_timeout)
            races = normalize_schedule(payload)
        except (SourceError, ValueError) as exc:
            logger.warning("Failed to fetch race schedule: %s", exc)
            return RaceInfo()
        return partition_schedule(races, today or dt.date.today())
