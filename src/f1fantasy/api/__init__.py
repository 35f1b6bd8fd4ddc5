"""REST API over the fantasy season loader."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Literal

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from f1fantasy.api.schemas import (
    ComparedEntityResponse,
    ComparisonPointResponse,
    ComparisonResponse,
    StandingsResponse,
)
from f1fantasy.config import EndpointConfig, load_config
from f1fantasy.loader import FantasyDataLoader
from f1fantasy.models import EntityRecord, LoadResult, RaceInfo
from f1fantasy.tables import SortCriteria, compare_entities, find_entity, format_price, sort_entities


logger = logging.getLogger(__name__)

EntityKind = Literal["drivers", "constructors"]


def _compared(entity: EntityRecord) -> ComparedEntityResponse:
    return ComparedEntityResponse(
        id=entity.id,
        display_name=entity.display_name,
        price=entity.price,
        price_label=format_price(entity.price),
        season_score=entity.season_score,
    )


def create_app(
    config: EndpointConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    config = config or load_config()
    client = httpx.AsyncClient(transport=transport, timeout=config.request_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await client.aclose()

    app = FastAPI(title="f1fantasy stats", lifespan=lifespan)
    loader = FantasyDataLoader(client, config)
    app.state.config = config
    app.state.loader = loader
    app.state.latest = None

    async def refresh() -> LoadResult:
        result = await loader.load()
        app.state.latest = result
        return result

    async def latest_or_load() -> LoadResult:
        result = app.state.latest
        # Anything short of fresh live data retries the live source.
        if result is None or result.data is None or result.is_stale:
            result = await refresh()
        return result

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/fantasy", response_model=LoadResult)
    async def fantasy() -> LoadResult:
        return await refresh()

    @app.get("/schedule", response_model=RaceInfo)
    async def schedule() -> RaceInfo:
        return await loader.load_schedule()

    @app.get("/standings/{kind}", response_model=StandingsResponse)
    async def standings(
        kind: EntityKind,
        sort_by: str = Query("season_score"),
        sort_direction: Literal["asc", "desc"] = Query("desc"),
    ) -> StandingsResponse:
        result = await latest_or_load()
        if result.data is None:
            raise HTTPException(status_code=503, detail="Fantasy data unavailable")
        entities = result.data.drivers if kind == "drivers" else result.data.constructors
        try:
            ordered = sort_entities(entities, SortCriteria(sort_by=sort_by, sort_direction=sort_direction))  # type: ignore[arg-type]
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return StandingsResponse(
            kind=kind,
            season=result.data.season,
            last_updated=result.data.last_updated,
            is_stale=result.is_stale,
            sort_by=sort_by,
            sort_direction=sort_direction,
            entities=ordered,
        )

    @app.get("/compare", response_model=ComparisonResponse)
    async def compare(
        first: str,
        second: str,
        kind: EntityKind = Query("drivers"),
    ) -> ComparisonResponse:
        if first == second:
            raise HTTPException(status_code=400, detail="Select two different entries to compare")
        result = await latest_or_load()
        if result.data is None:
            raise HTTPException(status_code=503, detail="Fantasy data unavailable")
        entities = result.data.drivers if kind == "drivers" else result.data.constructors
        left = find_entity(entities, first)
        right = find_entity(entities, second)
        missing = [entity_id for entity_id, entity in ((first, left), (second, right)) if entity is None]
        if missing:
            raise HTTPException(status_code=404, detail=f"Unknown {kind}: {', '.join(missing)}")
        points = compare_entities(left, right)
        return ComparisonResponse(
            kind=kind,
            is_stale=result.is_stale,
            first=_compared(left),
            second=_compared(right),
            points=[
                ComparisonPointResponse(round=p.round, label=p.label, first=p.first, second=p.second)
                for p in points
            ],
        )

    @app.get("/api/statistics/{year}")
    async def statistics_proxy(year: str) -> Response:
        url = config.upstream_url_for(year)
        try:
            upstream = await client.get(url, timeout=config.live_timeout)
        except httpx.HTTPError as exc:
            logger.warning("Proxy request to %s failed: %s", url, exc)
            return JSONResponse(status_code=500, content={"error": "Proxy error", "details": str(exc)})
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type=upstream.headers.get("content-type", "application/json"),
        )

    return app
