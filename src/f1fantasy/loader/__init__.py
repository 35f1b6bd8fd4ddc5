"""Two-tier season loading on top of the ingest adapters."""

from .service import FantasyDataLoader, LoadStage

__all__ = ["FantasyDataLoader", "LoadStage"]
