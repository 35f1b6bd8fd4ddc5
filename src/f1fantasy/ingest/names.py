"""Resolve driver and constructor abbreviations to display names."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import httpx

from f1fantasy.ingest.sources import SourceError, fetch_json


logger = logging.getLogger(__name__)


def _mapped_name(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, Mapping):
        name = value.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def normalize_driver_mapping(raw: Any) -> dict[str, str]:
    """Flatten ``{abbr: {"name": ...}}`` (or ``{abbr: name}``) into ``{abbr: name}``."""

    if not isinstance(raw, Mapping):
        raise ValueError(f"driver mapping must be an object, got {type(raw).__name__}")
    lookup: dict[str, str] = {}
    for abbr, value in raw.items():
        name = _mapped_name(value)
        if name:
            lookup[str(abbr)] = name
    return lookup


def normalize_constructor_mapping(raw: Any) -> dict[str, str]:
    """Accept either ``{id: name}`` or ``[{"id": ..., "name": ...}]`` and return ``{id: name}``."""

    if isinstance(raw, Mapping):
        items = raw.items()
    elif isinstance(raw, list):
        items = (
            (entry.get("id"), entry)
            for entry in raw
            if isinstance(entry, Mapping)
        )
    else:
        raise ValueError(f"constructor mapping must be an object or list, got {type(raw).__name__}")

    lookup: dict[str, str] = {}
    for key, value in items:
        name = _mapped_name(value)
        if key is not None and name:
            lookup[str(key)] = name
    return lookup


def driver_abbreviation(raw_id: str) -> str:
    """``"MCL_NOR"`` -> ``"NOR"``; bare abbreviations pass through."""

    return raw_id.rsplit("_", 1)[-1] if "_" in raw_id else raw_id


class NameResolver:
    """Lookup tables for display names, fetched once per resolver.

    Concurrent :meth:`ensure_loaded` calls share a single fetch. A failed fetch
    leaves both tables empty so names fall back to raw identifiers.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None,
        *,
        driver_mapping_url: str | None = None,
        constructor_mapping_url: str | None = None,
        timeout: float | None = None,
    ):
        self._client = client
        self._driver_mapping_url = driver_mapping_url
        self._constructor_mapping_url = constructor_mapping_url
        self._timeout = timeout
        self._drivers: dict[str, str] = {}
        self._constructors: dict[str, str] = {}
        self._lock = asyncio.Lock()
        self.loaded = False

    @classmethod
    def from_mappings(
        cls,
        drivers: Any | None = None,
        constructors: Any | None = None,
    ) -> "NameResolver":
        resolver = cls(None)
        resolver._drivers = normalize_driver_mapping(drivers or {})
        resolver._constructors = normalize_constructor_mapping(constructors or {})
        resolver.loaded = True
        return resolver

    async def ensure_loaded(self) -> None:
        if self.loaded:
            return
        async with self._lock:
            if self.loaded:
                return
            try:
                drivers, constructors = await self._fetch_tables()
            except (SourceError, ValueError) as exc:
                logger.warning("Name mappings unavailable, using raw identifiers: %s", exc)
                drivers, constructors = {}, {}
            else:
                logger.info(
                    "Loaded name mappings (%s drivers, %s constructors)",
                    len(drivers),
                    len(constructors),
                )
            self._drivers = drivers
            self._constructors = constructors
            self.loaded = True

    async def _fetch_tables(self) -> tuple[dict[str, str], dict[str, str]]:
        if self._client is None or not self._driver_mapping_url or not self._constructor_mapping_url:
            raise ValueError("mapping endpoints are not configured")
        raw_drivers = await fetch_json(self._client, self._driver_mapping_url, timeout=self._timeout)
        raw_constructors = await fetch_json(self._client, self._constructor_mapping_url, timeout=self._timeout)
        return normalize_driver_mapping(raw_drivers), normalize_constructor_mapping(raw_constructors)

    def resolve_driver_name(self, raw_id: str) -> str:
        abbr = driver_abbreviation(raw_id)
        return self._drivers.get(abbr, abbr)

    def resolve_constructor_name(self, constructor_id: str) -> str:
        return self._constructors.get(constructor_id, constructor_id)
