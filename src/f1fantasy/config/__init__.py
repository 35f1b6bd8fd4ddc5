"""Configuration helpers for upstream endpoints and timeouts."""

from .endpoints import BUNDLED_FALLBACK, DEFAULT_SEASON, EndpointConfig, load_config

__all__ = [
    "BUNDLED_FALLBACK",
    "DEFAULT_SEASON",
    "EndpointConfig",
    "load_config",
]
