"""Fantasy F1 season statistics: ingestion, aggregation and API."""

__version__ = "0.1.0"
