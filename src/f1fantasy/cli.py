"""Command-line interface for browsing fantasy season statistics."""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
from pathlib import Path
from typing import Sequence

import httpx

from f1fantasy.config import EndpointConfig, load_config
from f1fantasy.loader import FantasyDataLoader
from f1fantasy.models import EntityRecord, LoadResult, RaceInfo
from f1fantasy.tables import SORT_KEYS, SortCriteria, compare_entities, find_entity, format_price, sort_entities


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fantasy F1 season statistics")
    parser.add_argument("--season", type=int, default=None, help="Season year (default from F1FANTASY_SEASON)")
    parser.add_argument("--stats-url", default=None, help="Override the live statistics URL")
    parser.add_argument("--fallback", default=None, help="Fallback statistics URL or JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log fetch and fallback details")
    sub = parser.add_subparsers(dest="command", required=True)

    standings = sub.add_parser("standings", help="Print the season table")
    standings.add_argument("--kind", choices=("drivers", "constructors"), default="drivers")
    standings.add_argument("--sort-by", choices=SORT_KEYS, default="season_score")
    standings.add_argument("--asc", action="store_true", help="Sort ascending instead of descending")
    standings.add_argument("--limit", type=int, default=None, help="Only show the first N rows")
    standings.add_argument("--output", type=Path, default=None, help="Also write the table to a CSV file")

    compare = sub.add_parser("compare", help="Compare two entries round by round")
    compare.add_argument("first", help="Entity id, e.g. MCL_NOR")
    compare.add_argument("second", help="Entity id, e.g. RED_VER")
    compare.add_argument("--kind", choices=("drivers", "constructors"), default="drivers")

    sub.add_parser("schedule", help="Show the last and next race")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> EndpointConfig:
    config = load_config(args.season)
    overrides: dict[str, object] = {}
    if args.stats_url:
        overrides["stats_url"] = args.stats_url
    if args.fallback:
        overrides["fallback_source"] = args.fallback
    return config.with_overrides(**overrides) if overrides else config


async def _load(config: EndpointConfig) -> LoadResult:
    async with httpx.AsyncClient(timeout=config.request_timeout) as client:
        return await FantasyDataLoader(client, config).load()


async def _load_schedule(config: EndpointConfig) -> RaceInfo:
    async with httpx.AsyncClient(timeout=config.request_timeout) as client:
        return await FantasyDataLoader(client, config).load_schedule()


def _require_data(result: LoadResult):
    if result.data is None:
        raise SystemExit("Failed to load fantasy data from both the live and fallback sources")
    if result.is_stale:
        print("Stale data: showing cached information, the live source was unavailable.")
    return result.data


def _write_csv(path: Path, entities: Sequence[EntityRecord]) -> None:
    rounds = sorted({key for entity in entities for key in entity.scores_by_race}, key=int)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "display_name", "price", "season_score", *[f"R{r}" for r in rounds]])
        for entity in entities:
            writer.writerow([
                entity.id,
                entity.display_name,
                entity.price,
                entity.season_score,
                *[entity.scores_by_race.get(r, "") for r in rounds],
            ])


def _print_standings(args: argparse.Namespace, config: EndpointConfig) -> None:
    data = _require_data(asyncio.run(_load(config)))
    entities = data.drivers if args.kind == "drivers" else data.constructors
    criteria = SortCriteria(sort_by=args.sort_by, sort_direction="asc" if args.asc else "desc")
    try:
        ordered = sort_entities(entities, criteria)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    if args.limit is not None:
        ordered = ordered[: max(0, args.limit)]

    print(f"Season {data.season} {args.kind} (updated {data.last_updated:%Y-%m-%d %H:%M} UTC)")
    for rank, entity in enumerate(ordered, start=1):
        print(f"{rank:>3}. {entity.display_name:<28} {format_price(entity.price):>8} {entity.season_score:>6} pts")
    if args.output:
        _write_csv(args.output, ordered)
        print(f"Wrote {len(ordered)} rows to {args.output}")


def _print_comparison(args: argparse.Namespace, config: EndpointConfig) -> None:
    data = _require_data(asyncio.run(_load(config)))
    entities = data.drivers if args.kind == "drivers" else data.constructors
    left = find_entity(entities, args.first)
    right = find_entity(entities, args.second)
    for entity_id, entity in ((args.first, left), (args.second, right)):
        if entity is None:
            raise SystemExit(f"Unknown {args.kind} id {entity_id!r}")
    try:
        points = compare_entities(left, right)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    print(f"{'':>6} {left.display_name:>20} {right.display_name:>20}")
    print(f"{'Price':>6} {format_price(left.price):>20} {format_price(right.price):>20}")
    print(f"{'Total':>6} {left.season_score:>20} {right.season_score:>20}")
    for point in points:
        print(f"{point.label:>6} {point.first:>20} {point.second:>20}")


def _print_schedule(config: EndpointConfig) -> None:
    info = asyncio.run(_load_schedule(config))
    last = info.current_race
    upcoming = info.upcoming_race
    print(f"Last race: {f'R{last.round} {last.name} ({last.date:%b %d})' if last else '-'}")
    print(f"Next race: {f'R{upcoming.round} {upcoming.name} ({upcoming.date:%b %d})' if upcoming else '-'}")


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = _build_config(args)

    if args.command == "standings":
        _print_standings(args, config)
    elif args.command == "compare":
        _print_comparison(args, config)
    elif args.command == "schedule":
        _print_schedule(config)
    elif args.command == "serve":
        import uvicorn

        from f1fantasy.api import create_app

        uvicorn.run(create_app(config), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
