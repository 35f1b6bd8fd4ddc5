"""Read JSON payloads from HTTP endpoints or bundled files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx


class SourceError(RuntimeError):
    """Raised when a source cannot be reached or does not decode as JSON."""

    def __init__(self, location: str, message: str):
        super().__init__(f"{location}: {message}")
        self.location = location


def is_remote(location: str | Path) -> bool:
    return isinstance(location, str) and location.startswith(("http://", "https://"))


async def fetch_json(
    client: httpx.AsyncClient,
    location: str | Path,
    *,
    timeout: float | None = None,
) -> Any:
    """Return the decoded JSON body at ``location``.

    Transport errors, timeouts, non-2xx statuses, unreadable files and
    malformed JSON all surface as :class:`SourceError`.
    """

    if not is_remote(location):
        return _read_file(Path(location))

    url = str(location)
    try:
        resp = await client.get(url, timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceError(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise SourceError(url, f"{type(exc).__name__}: {exc}") from exc
    try:
        return resp.json()
    except ValueError as exc:
        raise SourceError(url, f"invalid JSON: {exc}") from exc


def _read_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceError(str(path), f"unreadable: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SourceError(str(path), f"invalid JSON: {exc}") from exc
